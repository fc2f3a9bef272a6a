"""Custom SQLAlchemy types and boundary conversions shared by models and services"""
from datetime import datetime, timezone
from typing import Any, Optional
import uuid

from sqlalchemy import TypeDecorator, String


def generate_uuid():
    """Generate a UUID string"""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    """Current time as a naive UTC datetime (the storage convention for all timestamps)"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalize a caller-supplied datetime to naive UTC; naive input is assumed UTC"""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def coerce_batch_year(value: Any) -> int:
    """
    Convert a batch year claimed at a boundary (form field, JSON, query string)
    to the canonical integer.

    Accepts ints and strings of decimal digits ("2025", " 2025 ").
    Rejects bools, floats and strings such as "2025.0" or "20x5".

    Raises:
        ValueError: if the value is not an integral year
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid batch year: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        if text.isdigit():
            return int(text)
    raise ValueError(f"Invalid batch year: {value!r}")


class GUID(TypeDecorator):
    """Platform-independent GUID type that stores UUIDs as VARCHAR(36)"""
    impl = String(36)
    cache_ok = True

    def load_dialect_impl(self, dialect):
        return dialect.type_descriptor(String(36))

    def process_bind_param(self, value, dialect):
        if value is not None:
            return str(value)
        return value

    def process_result_value(self, value, dialect):
        if value is not None:
            return str(value)
        return value
