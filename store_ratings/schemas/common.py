"""Shared schema pieces: camelCase base model, response envelope, field errors, list queries."""

from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

# Pagination bounds shared by every list endpoint.
DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100

# Location prefixes FastAPI adds to validation errors; not part of the field name.
_LOC_SOURCES = frozenset({"body", "query", "path", "header", "cookie"})

DataT = TypeVar("DataT")
ModelT = TypeVar("ModelT", bound=BaseModel)


class CamelModel(BaseModel):
    """Base for API schemas: camelCase on the wire, snake_case in Python, readable from ORM rows."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ApiResponse(CamelModel, Generic[DataT]):
    """Success envelope: {statusCode, data, message, success}."""

    status_code: int = Field(default=200, description="HTTP status code echoed in the body")
    data: DataT | None = None
    message: str = Field(default="Success")
    success: bool = True


class FieldError(BaseModel):
    """One field-level validation problem."""

    field: str
    message: str


class ValidationErrorResponse(BaseModel):
    """Body returned with 400 when input fails schema validation."""

    error: list[FieldError]


def field_errors(errors: list[dict[str, Any]]) -> list[FieldError]:
    """Flatten pydantic/FastAPI error dicts into field/message pairs."""
    out: list[FieldError] = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ()) if part not in _LOC_SOURCES]
        out.append(FieldError(field=".".join(loc), message=str(err.get("msg", "Invalid value"))))
    return out


def validate_payload(
    model: type[ModelT], raw: Any
) -> tuple[ModelT | None, list[FieldError]]:
    """
    Validate raw input against a schema without raising for ordinary invalid input.

    Returns (value, []) on success or (None, errors) with one entry per offending field.
    """
    try:
        return model.model_validate(raw), []
    except ValidationError as e:
        return None, field_errors(e.errors(include_url=False))


class ListQuery(CamelModel):
    """Pagination and sort direction shared by list endpoints (page=1, limit=10, asc by default)."""

    page: int = Field(default=DEFAULT_PAGE, ge=1)
    limit: int = Field(default=DEFAULT_LIMIT, ge=1, le=MAX_LIMIT)
    sort_order: Literal["asc", "desc"] = "asc"


class PaginationMeta(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "PaginationMeta":
        total_pages = -(-total // limit) if limit else 0
        return cls(page=page, limit=limit, total=total, total_pages=total_pages)
