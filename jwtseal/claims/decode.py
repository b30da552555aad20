"""Decoding verified payloads into mappings or structured records."""

from __future__ import annotations

import dataclasses
import json
from typing import Any, Dict, Iterable, Mapping, MutableMapping, Union

from ..errors import ClaimsDecodeError, MissingRequiredFieldError
from .schema import RecordSchema, is_zero


def load_payload(source: Any) -> Dict[str, Any]:
    """Parse payload bytes (or a token carrying them) into a JSON object."""
    if isinstance(source, Mapping):
        return dict(source)
    raw: Union[bytes, str] = source if isinstance(source, (bytes, bytearray, str)) else getattr(source, "payload", None)
    if raw is None:
        raise TypeError(f"cannot read claims from {type(source).__name__}")
    try:
        data = json.loads(raw)
    except (UnicodeDecodeError, ValueError) as exc:
        raise ClaimsDecodeError("payload is not valid JSON") from exc
    if not isinstance(data, dict):
        raise ClaimsDecodeError("payload is not a JSON object")
    return data


def decode_claims(
    source: Any,
    destination: Any = dict,
    *,
    strict: bool = False,
    required: Iterable[str] = (),
) -> Any:
    """Decode claims into ``destination``.

    ``destination`` may be ``dict`` (or another mapping type), a mutable
    mapping instance updated in place, a dataclass type, or a
    :class:`RecordSchema`. In strict mode a required field that is absent or
    holds a zero value raises ``MissingRequiredFieldError``; otherwise unknown
    and missing fields are ignored.
    """
    data = load_payload(source)

    if isinstance(destination, RecordSchema):
        return destination.load(data, strict=strict)
    if isinstance(destination, type) and dataclasses.is_dataclass(destination):
        return RecordSchema.from_dataclass(destination).load(data, strict=strict)

    if strict:
        for name in required:
            if is_zero(data.get(name)):
                raise MissingRequiredFieldError(name)

    if isinstance(destination, MutableMapping):
        destination.update(data)
        return destination
    if isinstance(destination, type) and issubclass(destination, Mapping):
        return destination(data)
    raise TypeError(f"unsupported claims destination: {destination!r}")
