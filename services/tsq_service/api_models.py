"""Request and response models for the TSQ HTTP API.

Field names are snake_case in Python and camelCase (``tsqName``) on the wire.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class TsqWriteRequest(BaseModel):
    """PUT/POST body: ``{"tsqName": str, "record": str}``.

    ``tsqName`` is optional; the path parameter names the queue. When given it
    must match the path.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", strict=True)

    tsq_name: str | None = Field(default=None, alias="tsqName")
    record: str = Field(..., description="Record payload to append")


class TsqRecord(BaseModel):
    record: str


class TsqBrowseResponse(BaseModel):
    """GET response: ``{"tsqName": str, "records": [{"record": str}, ...]}``."""

    model_config = ConfigDict(populate_by_name=True)

    tsq_name: str = Field(..., alias="tsqName")
    records: list[TsqRecord] = Field(default_factory=list)

    @classmethod
    def from_records(cls, tsq_name: str, records: list[str]) -> "TsqBrowseResponse":
        return cls(tsq_name=tsq_name, records=[TsqRecord(record=r) for r in records])


class TsqResultResponse(BaseModel):
    """PUT/POST/DELETE response: ``{"tsqName": str, "result": str}``."""

    model_config = ConfigDict(populate_by_name=True)

    tsq_name: str = Field(..., alias="tsqName")
    result: str
