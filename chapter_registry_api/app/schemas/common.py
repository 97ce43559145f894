"""Helpers shared by the record schemas."""

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def to_storage(value: datetime) -> str:
    """Serialize a timestamp the way it is stored in the database."""
    return value.isoformat()


# Shared pydantic config: accept both the alias (column name) and the
# Python field name when constructing a record.
RECORD_CONFIG = {
    "populate_by_name": True,
    "from_attributes": True,
}

# Payloads whose fields are checked by the services.  Numbers sent for
# text fields are taken as their string form instead of being rejected
# by pydantic, so the service's own checks and messages still apply.
REQUEST_CONFIG = {
    **RECORD_CONFIG,
    "coerce_numbers_to_str": True,
}
