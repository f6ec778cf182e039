# backend/agenda/schemas/base.py

from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Snake_case attributes, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def require_text(value: str | None) -> str | None:
    """Strip and reject blank strings; None passes through."""
    if value is None:
        return None
    value = value.strip()
    if not value:
        raise ValueError("must not be empty")
    return value


def same_awareness(a, b) -> bool:
    """True when both datetimes are naive or both carry an offset."""
    return (a.tzinfo is None) == (b.tzinfo is None)


NonEmptyStr = Annotated[str, AfterValidator(require_text)]
