"""
Enums used as Prometheus label values for TSQ operations.
"""

from __future__ import annotations

from enum import Enum


class TsqOperation(str, Enum):
    BROWSE = "browse"
    UPDATE = "update"
    CREATE = "create"
    DELETE = "delete"


class OperationStatus(str, Enum):
    SUCCESS = "success"
    REJECTED = "rejected"  # POST on existing queue, PUT on absent queue
    FAILED = "failed"  # client-side problem, e.g. invalid body
    ERROR = "error"  # backend or unexpected failure
