"""
Tea API — Validation
One routine turns untrusted input into a typed, default-filled schema
instance, or raises ValidationFailed listing every offending field.
"""

import re
from datetime import datetime
from typing import Any, Mapping, TypeVar

import structlog
from pydantic import BaseModel
from pydantic import ValidationError as SchemaError

from errors import ValidationFailed

log = structlog.get_logger()

S = TypeVar("S", bound=BaseModel)

UUID_PATTERN = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)
TIMESTAMP_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?Z$")


def is_uuid(value: str) -> bool:
    return bool(UUID_PATTERN.fullmatch(value))


def check_uuid(value: str) -> str:
    if not is_uuid(value):
        raise ValueError("Invalid uuid")
    return value


def check_timestamp(value: str) -> str:
    """Accept ISO-8601 UTC timestamps such as 2026-01-01T08:00:00.000Z."""
    if not TIMESTAMP_PATTERN.fullmatch(value):
        raise ValueError("Invalid datetime")
    try:
        datetime.fromisoformat(value[:19])
    except ValueError:
        raise ValueError("Invalid datetime") from None
    return value


def flatten_errors(exc: SchemaError, root: str) -> dict[str, str]:
    """Group messages by top-level field; errors with no field land under ``root``."""
    grouped: dict[str, list[str]] = {}
    for error in exc.errors():
        loc = error["loc"]
        key = str(loc[0]) if loc else root
        grouped.setdefault(key, []).append(error["msg"])
    return {key: "; ".join(messages) for key, messages in grouped.items()}


def validate(schema: type[S], data: Any, message: str = "Invalid request body", root: str = "body") -> S:
    try:
        return schema.model_validate(data)
    except SchemaError as exc:
        details = flatten_errors(exc, root)
        log.info("tea_api.validation_failed", schema=schema.__name__, fields=sorted(details))
        raise ValidationFailed(message, details) from None


def validate_query(schema: type[S], params: Mapping[str, str]) -> S:
    return validate(schema, dict(params), message="Invalid query parameters", root="query")


def require_uuid(value: str, label: str) -> str:
    """Path ids must be UUID-shaped before any lookup happens."""
    if not is_uuid(value):
        raise ValidationFailed(f"Invalid {label} ID format")
    return value
