"""
Shared pydantic building blocks.

API payloads use camelCase (jobUrl, applicationDate); Python code uses
snake_case. Both spellings are accepted on input.
"""

from datetime import date, datetime, time
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, StringConstraints
from pydantic.alias_generators import to_camel


NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class CamelModel(BaseModel):
    """Base model with camelCase aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def parse_wall_clock(value: Any) -> Any:
    """
    Normalize an event date to a naive local wall-clock datetime.

    - "YYYY-MM-DD" / date -> midnight of that calendar day
    - "YYYY-MM-DDTHH:MM[:SS]" / naive datetime -> unchanged
    - values carrying a UTC offset are rejected; the stored value is always
      exactly the wall-clock time that was entered
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        return datetime.combine(value, time())
    elif isinstance(value, str):
        text = value.strip()
        if len(text) == 10:
            return datetime.combine(date.fromisoformat(text), time())
        parsed = datetime.fromisoformat(text)
    else:
        return value

    if parsed.tzinfo is not None:
        raise ValueError("eventDate must be a local date-time without a UTC offset")
    return parsed


WallClockDateTime = Annotated[datetime, BeforeValidator(parse_wall_clock)]


def reject_null(value: Any, field_name: str) -> Any:
    if value is None:
        raise ValueError(f"{to_camel(field_name)} may not be null")
    return value
