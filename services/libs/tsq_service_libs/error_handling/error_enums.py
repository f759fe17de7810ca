"""
Centralized error code definitions for the TSQ service.
"""

from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    PROCESSING_ERROR = "PROCESSING_ERROR"  # Internal processing failures
