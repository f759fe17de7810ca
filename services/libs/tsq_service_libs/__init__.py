"""
Shared service libraries for the TSQ REST service.

Structured logging, error handling, configuration base classes and Quart
middleware used by ``services.tsq_service``.
"""
