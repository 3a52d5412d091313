"""
Request body validation shared by JSON and multipart endpoints.

Endpoints that accept an optional image take their fields either as a JSON
body or as multipart form fields next to the file, so the body is parsed by
hand instead of through FastAPI's body parameters. Validation failures are
reported as ``InvalidArgumentError`` and end up as 400 responses.
"""
import json
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from fastapi import Request, UploadFile
from pydantic import BaseModel, ValidationError
from starlette.datastructures import UploadFile as StarletteUploadFile

from services.exceptions import InvalidArgumentError

IMAGE_FIELD = "litmark_image"

# Leading loc segments FastAPI adds for request parameters
_LOCATION_PREFIXES = {"body", "path", "query", "header", "cookie"}

M = TypeVar("M", bound=BaseModel)


def format_validation_error(errors: Sequence[dict[str, Any]]) -> str:
    """
    Turn pydantic error details into one readable message.

    Only the first error is reported, as ``"<field>: <message>"``.
    """
    if not errors:
        return "Invalid request."
    error = errors[0]
    loc = [str(part) for part in error.get("loc", ())]
    if loc and loc[0] in _LOCATION_PREFIXES:
        loc = loc[1:]

    message = error.get("msg", "Invalid value.")
    ctx_error = (error.get("ctx") or {}).get("error")
    if error.get("type") == "value_error" and ctx_error is not None:
        # Custom validators raise ValueError; pydantic prefixes their message
        message = str(ctx_error)

    if not loc:
        return message
    return f"{'.'.join(loc)}: {message}"


@dataclass
class ValidatedBody(Generic[M]):
    """A validated request body plus the uploaded image, if one was sent."""

    data: M
    image: UploadFile | None = None


class BodyValidator(Generic[M]):
    """
    Dependency that validates the request body against a pydantic schema.

    JSON bodies are validated as-is. Multipart and urlencoded bodies are read
    as form fields; the file under ``file_field`` is returned separately and
    empty text fields are treated as absent.
    """

    def __init__(self, schema: type[M], file_field: str = IMAGE_FIELD) -> None:
        self.schema = schema
        self.file_field = file_field

    async def __call__(self, request: Request) -> ValidatedBody[M]:
        content_type = request.headers.get("content-type", "")
        image: UploadFile | None = None

        if content_type.startswith(("multipart/form-data", "application/x-www-form-urlencoded")):
            form = await request.form()
            raw: dict[str, Any] = {}
            for key, value in form.multi_items():
                if isinstance(value, StarletteUploadFile):
                    if key == self.file_field and value.filename:
                        image = value
                    continue
                if value != "":
                    raw[key] = value
        else:
            raw = await self._read_json(request)

        try:
            data = self.schema.model_validate(raw)
        except ValidationError as e:
            raise InvalidArgumentError(format_validation_error(e.errors())) from e
        return ValidatedBody(data=data, image=image)

    @staticmethod
    async def _read_json(request: Request) -> dict[str, Any]:
        body = await request.body()
        if not body.strip():
            return {}
        try:
            raw = json.loads(body)
        except ValueError as e:
            raise InvalidArgumentError("Request body must be valid JSON.") from e
        if not isinstance(raw, dict):
            raise InvalidArgumentError("Request body must be a JSON object.")
        return raw
