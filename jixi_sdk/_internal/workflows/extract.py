"""Tolerant decoding of Jixi API response bodies.

The API is not consistent about response shapes: the same endpoint may
answer with a bare string, a ``{"url": "..."}`` envelope or a quoted
string literal, and list endpoints answer with an array at the root.
The helpers here accept all of those without requiring one canonical
schema.
"""

import json
import typing
from collections.abc import Callable
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, PydanticSchemaGenerationError, ValidationError

from jixi_sdk.exceptions import JixiDecodeError

T = TypeVar("T")

ITEMS_FIELD = "items"
URL_FIELD = "url"

Decoder = Callable[[str], Any]


class ItemsEnvelope(BaseModel, Generic[T]):
    """Synthetic single-field object used to decode a root-level array."""

    items: list[T]


def items_envelope(item_type: Any) -> type[ItemsEnvelope[Any]]:
    """Parametrized envelope for ``item_type``.

    Raises:
        TypeError: If pydantic cannot validate ``item_type``.
    """
    try:
        return ItemsEnvelope[item_type]  # type: ignore[valid-type]
    except PydanticSchemaGenerationError as e:
        raise TypeError(f"Unsupported list item type: {item_type!r}") from e


def decode_json_array(text: str, item_type: type[T]) -> list[T]:
    """Decode a JSON array at the document root.

    Pydantic models only decode objects at the root, so the array is
    wrapped as ``{"items": <array>}``, decoded, then unwrapped.

    Raises:
        JixiDecodeError: If the text is not an array of ``item_type``.
    """
    wrapped = f'{{"{ITEMS_FIELD}":{text.strip()}}}'
    try:
        return items_envelope(item_type).model_validate_json(wrapped).items
    except ValidationError as e:
        raise JixiDecodeError(f"Failed to parse array response: {e.error_count()} error(s)") from e


def extract_string_field(text: str | None, field: str) -> str | None:
    """Scrape the first string value of ``field`` from raw JSON text.

    Finds the quoted key, the colon after it and the next quoted value.
    An escaped quote does not end the value. Returns None when any of
    those pieces is missing.
    """
    if not text:
        return None
    key = f'"{field}"'
    key_at = text.find(key)
    if key_at < 0:
        return None
    colon = text.find(":", key_at + len(key))
    if colon < 0:
        return None
    open_quote = text.find('"', colon + 1)
    if open_quote < 0:
        return None

    close_quote = open_quote + 1
    while close_quote < len(text):
        if text[close_quote] == '"' and text[close_quote - 1] != "\\":
            break
        close_quote += 1
    if close_quote >= len(text):
        return None

    return text[open_quote + 1 : close_quote].replace('\\"', '"')


def coerce_string_result(body: str | None) -> str:
    """Reduce a response body to the string a caller asked for.

    ``{"url": "X"}`` yields X, ``"X"`` yields X, anything else is
    returned trimmed.
    """
    result = (body or "").strip()
    if not result:
        return result
    if result.startswith("{"):
        maybe = extract_string_field(result, URL_FIELD)
        if maybe:
            return maybe
    elif result.startswith('"') and result.endswith('"'):
        return result.strip('"')
    return result


def make_decoder(result_type: Any = str) -> Decoder:
    """Build the body decoder for a caller's expected result type.

    Supported result types:
        str: tolerant string extraction.
        BaseModel subclass: ``model_validate_json``.
        list[X]: root-array decoding of X items.
        dict or None: plain JSON decoding, returned as is.
    """
    if result_type is str:
        return coerce_string_result

    if result_type is list or typing.get_origin(result_type) is list:
        (item_type,) = typing.get_args(result_type) or (Any,)
        # Fail here rather than on the first response.
        items_envelope(item_type)
        return lambda body: decode_json_array(body, item_type)

    if isinstance(result_type, type) and issubclass(result_type, BaseModel):
        model = result_type

        def decode_model(body: str) -> BaseModel:
            try:
                return model.model_validate_json(body)
            except ValidationError as e:
                raise JixiDecodeError(
                    f"Failed to parse response as {model.__name__}: {e.error_count()} error(s)"
                ) from e

        return decode_model

    if result_type is None or result_type is dict:
        return _decode_json

    raise TypeError(f"Unsupported result type: {result_type!r}")


def _decode_json(body: str) -> Any:
    try:
        return json.loads(body)
    except ValueError as e:
        raise JixiDecodeError(f"Failed to parse response as JSON: {e}") from e
