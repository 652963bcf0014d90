"""Pydantic models for the OCS response envelope."""

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class OCSMeta(BaseModel):
    """Logical-layer status of an OCS response."""

    status: str = Field(description='"ok" on success, "failure" otherwise')
    statuscode: int = Field(description="OCS status code (100/200 on success)")
    message: str | None = Field(None, description="Status message")

    @property
    def ok(self) -> bool:
        return self.status == "ok"


class OCSBody(BaseModel, Generic[T]):
    meta: OCSMeta
    data: Optional[T] = None


class OCSEnvelope(BaseModel, Generic[T]):
    """Top-level `{"ocs": {"meta": ..., "data": ...}}` wrapper."""

    ocs: OCSBody[T]
