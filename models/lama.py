"""Wire models for the LAMA reporting API.

Field names follow the API's camelCase JSON; Python attributes are
snake_case with aliases.
"""

from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _LamaModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class LoginRequest(_LamaModel):
    """Authentication handshake request."""

    member_id: str = Field(..., alias="memberId")
    login_id: str = Field(..., alias="loginId")
    password: str = Field(..., alias="password")


class LoginResponse(_LamaModel):
    """Authentication handshake response."""

    timestamp: Optional[int] = Field(default=None, alias="timestamp")
    version_no: Optional[str] = Field(default=None, alias="versionNo")
    member_id: Optional[str] = Field(default=None, alias="memberId")
    login_id: Optional[str] = Field(default=None, alias="loginId")
    response_code: int = Field(..., alias="responseCode")
    response_desc: str = Field(default="", alias="responseDesc")
    token: Optional[str] = Field(default=None, alias="token")

    @field_validator("response_desc", mode="before")
    @classmethod
    def validate_response_desc(cls, v: Any) -> Any:
        """Treat a null description as empty."""
        return "" if v is None else v


class MetricValue(_LamaModel):
    """Aggregate value; only `avg` carries data."""

    min: float = 0
    max: float = 0
    avg: float = 0
    med: float = 0


class MetricData(_LamaModel):
    key: str = Field(..., alias="key")
    value: Union[MetricValue, float] = Field(..., alias="value")


class MetricPayload(_LamaModel):
    application_id: int = Field(..., alias="applicationId")
    metric_data: List[MetricData] = Field(default_factory=list, alias="metricData")


class MetricsRequest(_LamaModel):
    """Sequenced envelope pushed to a category endpoint."""

    member_id: str = Field(..., alias="memberId")
    exchange_id: int = Field(..., alias="exchangeId")
    sequence_id: int = Field(..., ge=1, alias="sequenceId")
    timestamp: int = Field(..., alias="timestamp")
    payload: List[MetricPayload] = Field(default_factory=list, alias="payload")

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)


class MetricError(_LamaModel):
    """Per-entry error reported alongside a metrics response."""

    application_id: Optional[int] = Field(default=None, alias="applicationId")
    err_code: Optional[int] = Field(default=None, alias="errCode")
    err_desc: Optional[str] = Field(default=None, alias="errDesc")
    err_key: Optional[str] = Field(default=None, alias="errKey")
    measure: Optional[Any] = Field(default=None, alias="measure")


class MetricsResponse(_LamaModel):
    """Response to a metrics push."""

    timestamp: Optional[int] = Field(default=None, alias="timestamp")
    version_no: Optional[str] = Field(default=None, alias="versionNo")
    response_code: int = Field(..., alias="responseCode")
    response_desc: str = Field(default="", alias="responseDesc")
    errors: Optional[List[MetricError]] = Field(default=None, alias="errors")

    @field_validator("response_desc", mode="before")
    @classmethod
    def validate_response_desc(cls, v: Any) -> Any:
        """Treat a null description as empty."""
        return "" if v is None else v
