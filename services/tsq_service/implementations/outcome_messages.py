"""Outcome messages returned by queue backends for write and delete."""

from __future__ import annotations


def record_written(name: str, item_number: int) -> str:
    return f"Record written to TSQ {name} as item {item_number}"


def queue_deleted(name: str) -> str:
    return f"TSQ {name} deleted"


def queue_not_deleted(name: str) -> str:
    return f"TSQ {name} does not exist, nothing deleted"
