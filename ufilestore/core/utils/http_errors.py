"""HTTP response helpers for turning UFile replies into typed results."""

from __future__ import annotations

from typing import TypeVar

import requests
from pydantic import BaseModel, ValidationError

from ufilestore.core.exceptions import DecodeError, ProtocolError

ModelT = TypeVar("ModelT", bound=BaseModel)


def ensure_ok(response: requests.Response, operation: str) -> None:
    """Raise ProtocolError with the raw body unless the status is 200."""
    if response.status_code != 200:
        raise ProtocolError(operation, response.status_code, response.text)


def parse_json_model(
    response: requests.Response, model: type[ModelT], operation: str
) -> ModelT:
    """Validate a JSON response body against a pydantic model."""
    try:
        payload = response.json()
    except ValueError as exc:
        raise DecodeError(
            f"{operation} returned malformed JSON: {response.text!r}"
        ) from exc

    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise DecodeError(f"{operation} returned an unexpected body: {exc}") from exc
