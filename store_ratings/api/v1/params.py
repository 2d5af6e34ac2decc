"""Query-string parsing into list/filter schemas."""

from typing import TypeVar

from fastapi import Request
from pydantic import BaseModel

from store_ratings.core.errors import InvalidPayloadError
from store_ratings.schemas.common import validate_payload

ModelT = TypeVar("ModelT", bound=BaseModel)


def parse_query(model: type[ModelT], request: Request) -> ModelT:
    """Validate the query string against model (camelCase or snake_case keys); 400 with field errors otherwise."""
    value, errors = validate_payload(model, dict(request.query_params))
    if value is None:
        raise InvalidPayloadError([e.model_dump() for e in errors])
    return value
