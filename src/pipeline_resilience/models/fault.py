"""
Fault model: the error value a pipeline step observed.

The workflow host reports faults in several shapes (JavaScript error objects
serialized to JSON, provider error payloads, Python exceptions in tests and
scripts). Fault normalizes them to one structural contract: an optional
message and an optional numeric status carried under one of the
conventional field names.
"""

import traceback
from collections.abc import Mapping
from typing import Any, Optional, Union

import structlog
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

logger = structlog.get_logger(__name__)

# Checked in this order; the first numeric value wins
STATUS_FIELDS = ("status_code", "status", "code")


def _numeric(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


class Fault(BaseModel):
    """
    Normalized fault value.

    `code` may legitimately be a string (e.g. Node's "ETIMEDOUT"); such values
    are kept for the error record but never used as a status.
    """
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    message: Optional[str] = Field(default=None, description="Error message, if any")
    status_code: Optional[Union[int, str]] = Field(
        default=None,
        validation_alias=AliasChoices("status_code", "statusCode"),
        description="HTTP-style status code",
    )
    status: Optional[Union[int, str]] = Field(default=None, description="Alternate status field")
    code: Optional[Union[int, str]] = Field(default=None, description="Alternate status/code field")
    stack: Optional[str] = Field(default=None, description="Stack trace, if captured")

    @property
    def effective_status(self) -> Optional[int]:
        """First numeric status among status_code, status, code."""
        for name in STATUS_FIELDS:
            status = _numeric(getattr(self, name))
            if status is not None:
                return status
        return None

    @property
    def text(self) -> str:
        """Message used for substring matching (empty when absent)."""
        return self.message or ""

    @classmethod
    def from_exception(cls, exc: BaseException) -> "Fault":
        """
        Build a Fault from a Python exception.

        Status is read from `status_code`/`status`/`code` attributes, then
        from an attached `response.status_code` (httpx.HTTPStatusError and
        most provider SDK errors).
        """
        values: dict[str, Any] = {}
        for name in STATUS_FIELDS:
            attr = getattr(exc, name, None)
            if isinstance(attr, (int, str)) and not isinstance(attr, bool):
                values[name] = attr

        if not any(_numeric(v) is not None for v in values.values()):
            response = getattr(exc, "response", None)
            response_status = _numeric(getattr(response, "status_code", None))
            if response_status is not None:
                values["status_code"] = response_status

        stack = None
        if exc.__traceback__ is not None:
            stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))

        return cls(message=str(exc) or type(exc).__name__, stack=stack, **values)

    @classmethod
    def _salvage(cls, value: Mapping) -> "Fault":
        """Keep the usable parts of a payload that failed validation."""
        message = value.get("message")
        if message is None:
            message = str(dict(value))
        elif not isinstance(message, str):
            message = str(message)

        status_fields: dict[str, int] = {}
        for name in STATUS_FIELDS:
            status = _numeric(value.get(name))
            if status is None and name == "status_code":
                status = _numeric(value.get("statusCode"))
            if status is not None:
                status_fields[name] = status

        return cls(message=message, **status_fields)

    @classmethod
    def coerce(cls, value: Any) -> "Fault":
        """
        Normalize any fault-like value. Never raises.

        Accepts a Fault, an exception, a mapping (JSON error payload) or any
        other value, which is stringified into the message.
        """
        if isinstance(value, Fault):
            return value
        if value is None:
            return cls()
        if isinstance(value, BaseException):
            return cls.from_exception(value)
        if isinstance(value, Mapping):
            try:
                return cls.model_validate(dict(value))
            except ValidationError as exc:
                logger.debug("Unusable fault payload, keeping message and status", errors=exc.error_count())
                return cls._salvage(value)
        if isinstance(value, str):
            return cls(message=value)
        return cls(message=str(value))
