from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class UploadResult(BaseModel):
    """Stored object returned inside a successful POST /upload envelope."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    file_name: str = Field(alias="fileName")
    url: str
    size: int


class UploadResponse(BaseModel):
    """Response envelope for POST /upload.

    Exactly one of ``data`` / ``error`` is set, matching ``success``.
    """

    success: bool
    data: UploadResult | None = None
    error: str | None = None

    @model_validator(mode="after")
    def check_payload(self) -> "UploadResponse":
        if self.success and (self.data is None or self.error is not None):
            raise ValueError("successful response must carry data and no error")
        if not self.success and (self.error is None or self.data is not None):
            raise ValueError("failed response must carry an error and no data")
        return self

    @classmethod
    def ok(cls, result: UploadResult) -> "UploadResponse":
        return cls(success=True, data=result)

    @classmethod
    def fail(cls, message: str) -> "UploadResponse":
        return cls(success=False, error=message)

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
