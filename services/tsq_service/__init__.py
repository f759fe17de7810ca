"""TSQ REST Service: HTTP facade over Temporary Storage Queues."""
