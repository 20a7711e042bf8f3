"""ProcessQuery Response Models

Pydantic models for the batch metadata record that opens every ProcessQuery
response.
"""

from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field


class ErrorInfo(BaseModel):
    """Failure record of a rejected batch."""
    model_config = ConfigDict(populate_by_name=True, extra='allow')

    message: str = Field(
        "",
        alias="ErrorMessage",
        description="Server error message"
    )
    code: Optional[int] = Field(
        None,
        alias="ErrorCode",
        description="Server error code (HRESULT style, usually negative)"
    )
    type_name: Optional[str] = Field(
        None,
        alias="ErrorTypeName",
        description="Server exception type name"
    )
    trace_correlation_id: Optional[str] = Field(
        None,
        alias="TraceCorrelationId",
        description="Server trace correlation id"
    )
    value: Optional[Any] = Field(
        None,
        alias="ErrorValue",
        description="Additional error value"
    )


class BatchMetadata(BaseModel):
    """Entry 0 of every ProcessQuery response."""
    model_config = ConfigDict(populate_by_name=True, extra='allow')

    schema_version: Optional[str] = Field(
        None,
        alias="SchemaVersion",
        description="Client query schema version echoed by the server"
    )
    library_version: Optional[str] = Field(
        None,
        alias="LibraryVersion",
        description="Server library version"
    )
    error_info: Optional[ErrorInfo] = Field(
        None,
        alias="ErrorInfo",
        description="Failure record; when present the whole batch failed"
    )
    trace_correlation_id: Optional[str] = Field(
        None,
        alias="TraceCorrelationId",
        description="Server trace correlation id"
    )

    @property
    def is_error(self) -> bool:
        return self.error_info is not None
