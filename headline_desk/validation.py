"""
Request validation for the repository façade.

Requests are checked with pydantic schemas so that every violation in a
request is reported at once. Category existence is checked through the
validation context (``category_exists``), since it depends on the store.
Successful validation returns a normalized copy of the input (enums
parsed, subtitle defaulted, names trimmed).
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Callable, Optional

import pydantic
from pydantic import BaseModel, Field, StrictBool, StringConstraints, ValidationInfo, field_validator

from .core.errors import ValidationError
from .core.types import FieldError, HeadlineDraft, HeadlinePriority, HeadlineState, HeadlineUpdate

CATEGORY_NAME_MAX = 50
DISPLAY_LINES_MIN = 1
DISPLAY_LINES_MAX = 3

CategoryNameStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=CATEGORY_NAME_MAX)]
TitleStr = Annotated[str, StringConstraints(min_length=1)]
DisplayLines = Annotated[int, Field(ge=DISPLAY_LINES_MIN, le=DISPLAY_LINES_MAX, strict=True)]


def _parse_enum(enum_cls: type[Enum], name: str, value: Any):
    if value is None:
        return None
    try:
        return enum_cls.parse(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValueError(f"Invalid {name} {value!r}. Must be one of {allowed}") from None


class CategoryNameSchema(BaseModel):
    """Category name, trimmed before the length check."""
    name: CategoryNameStr


class StateSchema(BaseModel):
    """Target state of a bulk state change."""
    state: HeadlineState

    @field_validator("state", mode="before")
    @classmethod
    def _parse_state(cls, value):
        return _parse_enum(HeadlineState, "state", value)


class HeadlineUpdateSchema(BaseModel):
    """Partial headline update. Only the fields that are set get checked."""
    main_title: Optional[TitleStr] = None
    subtitle: Optional[str] = None
    categories: Optional[list[str]] = None
    state: Optional[HeadlineState] = None
    priority: Optional[HeadlinePriority] = None
    display_lines: Optional[DisplayLines] = None
    publish_date: Optional[datetime] = None
    is_breaking: Optional[StrictBool] = None

    @field_validator("main_title")
    @classmethod
    def _title_not_blank(cls, value):
        if value is not None and not value.strip():
            raise ValueError("Main title cannot be empty")
        return value

    @field_validator("categories")
    @classmethod
    def _known_categories(cls, value, info: ValidationInfo):
        if value is None:
            return None
        if not value:
            raise ValueError("At least one category is required")
        category_exists = (info.context or {}).get("category_exists")
        if category_exists is not None:
            unknown = [id for id in value if not category_exists(id)]
            if unknown:
                raise ValueError("Unknown category ID: " + ", ".join(repr(id) for id in unknown))
        return value

    @field_validator("state", mode="before")
    @classmethod
    def _parse_state(cls, value):
        return _parse_enum(HeadlineState, "state", value)

    @field_validator("priority", mode="before")
    @classmethod
    def _parse_priority(cls, value):
        return _parse_enum(HeadlinePriority, "priority", value)


class HeadlineCreateSchema(HeadlineUpdateSchema):
    """A new headline; the store assigns id and order."""
    main_title: TitleStr
    subtitle: Optional[str] = ""
    categories: list[str]
    state: HeadlineState = HeadlineState.DRAFT
    priority: HeadlinePriority = HeadlinePriority.NORMAL
    display_lines: DisplayLines = 1
    publish_date: datetime
    is_breaking: StrictBool = False


def validate_category_name(name: Any) -> str:
    """Return the trimmed category name or raise ValidationError."""
    return _check(CategoryNameSchema, {"name": name}).name


def validate_draft(draft: HeadlineDraft, category_exists: Callable[[str], bool]) -> HeadlineDraft:
    checked = _check(HeadlineCreateSchema, vars(draft), category_exists)
    values = checked.model_dump()
    values["subtitle"] = values["subtitle"] or ""
    return HeadlineDraft(**values)


def validate_update(update: HeadlineUpdate, category_exists: Callable[[str], bool]) -> HeadlineUpdate:
    """Validate only the fields present in a partial update."""
    checked = _check(HeadlineUpdateSchema, update.provided(), category_exists)
    return HeadlineUpdate(**checked.model_dump(exclude_unset=True))


def validate_state(state: Any) -> HeadlineState:
    return _check(StateSchema, {"state": state}).state


def _check(schema: type[BaseModel], data: dict[str, Any], category_exists: Callable[[str], bool] | None = None):
    try:
        return schema.model_validate(data, context={"category_exists": category_exists})
    except pydantic.ValidationError as exc:
        raise ValidationError([_field_error(error) for error in exc.errors()]) from exc


def _field_error(error: dict[str, Any]) -> FieldError:
    # loc is ("categories", 0) for a bad list item; report the field itself
    field = str(error["loc"][0]) if error["loc"] else "request"
    return FieldError(field, error["msg"].removeprefix("Value error, "))
