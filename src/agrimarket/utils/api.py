"""Shared pieces of the HTTP API: wire-format base model, pagination and body decoding."""

import json
import math

from fastapi import Request
from protean.exceptions import ValidationError
from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Schemas speak camelCase on the wire and snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Envelope(CamelModel):
    success: bool = True
    message: str | None = None


def pagination(total: int, page: int, limit: int, total_key: str) -> dict:
    """Pagination block keyed by ``total_key`` (``totalProducts``, ``totalOrders``, ...)."""
    return {
        total_key: total,
        "totalPages": math.ceil(total / limit) if limit else 0,
        "currentPage": page,
        "hasNextPage": page * limit < total,
        "hasPrevPage": page > 1,
    }


async def decode_body(request: Request, schema: type[BaseModel], encoded_key: str, label: str):
    """Read a JSON or form body into ``schema``.

    Fields may be sent directly or bundled as a JSON string under
    ``encoded_key`` (``productData``, ``categoryData``). Bundled fields win
    over direct ones.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(("multipart/form-data", "application/x-www-form-urlencoded")):
        form = await request.form()
        data = {key: value for key, value in form.items() if isinstance(value, str)}
    else:
        raw = await request.body()
        try:
            data = json.loads(raw) if raw else {}
        except ValueError as exc:
            raise ValidationError({"body": ["Request body must be valid JSON"]}) from exc
        if not isinstance(data, dict):
            raise ValidationError({"body": ["Request body must be a JSON object"]})

    encoded = data.pop(encoded_key, None)
    if isinstance(encoded, str):
        try:
            encoded = json.loads(encoded)
        except ValueError as exc:
            raise ValidationError({encoded_key: [f"Invalid {label} data format"]}) from exc
    if encoded is not None:
        if not isinstance(encoded, dict):
            raise ValidationError({encoded_key: [f"Invalid {label} data format"]})
        data.update(encoded)

    try:
        return schema.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationError(field_errors(exc.errors())) from exc


def field_errors(errors) -> dict[str, list[str]]:
    """Group pydantic error entries by field name."""
    messages: dict[str, list[str]] = {}
    for error in errors:
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        messages.setdefault(".".join(location) or "body", []).append(error.get("msg", "Invalid value"))
    return messages
