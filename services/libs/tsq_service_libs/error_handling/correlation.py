"""
Correlation context for HTTP requests.

The original caller-supplied value is kept verbatim for logs and response
headers; a UUID is always available for structured errors. Non-UUID inputs
are mapped to a deterministic UUIDv5 so the same input always correlates.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal
from uuid import NAMESPACE_URL, UUID, uuid4, uuid5

from quart import Request

CORRELATION_HEADER = "X-Correlation-ID"
CORRELATION_QUERY_PARAM = "correlation_id"

CorrelationSource = Literal["header", "query", "generated"]


@dataclass(frozen=True)
class CorrelationContext:
    original: str
    uuid: UUID
    source: CorrelationSource


def _to_uuid(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError:
        return uuid5(NAMESPACE_URL, f"tsq:correlation:{value}")


def build_correlation_context(
    value: str | None, source: CorrelationSource
) -> CorrelationContext:
    """Build a context from a raw value, generating a fresh ID when value is empty."""
    if not value:
        generated = uuid4()
        return CorrelationContext(original=str(generated), uuid=generated, source="generated")
    return CorrelationContext(original=value, uuid=_to_uuid(value), source=source)


def extract_correlation_context_from_request(request: Request) -> CorrelationContext:
    """Header first, then query parameter, otherwise generated."""
    header_value = request.headers.get(CORRELATION_HEADER)
    if header_value:
        return build_correlation_context(header_value.strip(), "header")

    query_value = request.args.get(CORRELATION_QUERY_PARAM)
    if query_value:
        return build_correlation_context(query_value.strip(), "query")

    return build_correlation_context(None, "generated")
