from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

# upper bound of the INTEGER columns ids, prices and counts are stored in
MAX_DB_INT = 2**31 - 1


class CamelOut(BaseModel):
    """ORM row -> camelCase JSON, the shape the web client reads."""
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    @field_validator("*")
    @classmethod
    def _naive_is_utc(cls, v):
        # timestamps are written as UTC; SQLite returns them without tzinfo
        if isinstance(v, datetime) and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


def drop_blank(data, fields):
    """Treat null / whitespace-only values of `fields` as absent so they surface as missing."""
    if not isinstance(data, dict):
        return data
    out = dict(data)
    for f in fields:
        v = out.get(f)
        if v is None or (isinstance(v, str) and not v.strip()):
            out.pop(f, None)
    return out
