"""Compact serialization: ``b64url(header).b64url(payload).b64url(signature)``."""

from __future__ import annotations

import base64
import binascii
import json
import re
from typing import Any, Mapping, Union

from ..errors import MalformedTokenError, TokenEncodingError
from ..utils.hashing import compact_json
from .types import CompactToken, DecodedToken, Header

TokenInput = Union[str, bytes, bytearray]

_B64URL_RE = re.compile(rb"[A-Za-z0-9_-]*")


def b64url_encode(data: bytes) -> bytes:
    """Encode ``data`` as base64url without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=")


def b64url_decode(segment: bytes) -> bytes:
    """Decode one canonical, unpadded base64url segment."""
    if not _B64URL_RE.fullmatch(segment):
        raise TokenEncodingError("segment contains characters outside the base64url alphabet")
    if len(segment) % 4 == 1:
        raise TokenEncodingError("segment has an impossible base64url length")
    try:
        data = base64.urlsafe_b64decode(segment + b"=" * (-len(segment) % 4))
    except binascii.Error as exc:
        raise TokenEncodingError() from exc
    if b64url_encode(data) != segment:
        raise TokenEncodingError("segment is not canonically encoded")
    return data


def encode_json_segment(value: Mapping[str, Any]) -> bytes:
    try:
        return b64url_encode(compact_json(value))
    except (TypeError, ValueError) as exc:
        raise TokenEncodingError(f"value is not JSON serializable: {exc}") from exc


def signing_input(header: Header, claims: Mapping[str, Any]) -> bytes:
    """Return the ``header.payload`` prefix that gets signed."""
    return encode_json_segment(header.to_json_object()) + b"." + encode_json_segment(claims)


def split(token: TokenInput) -> CompactToken:
    """Split token text into its three encoded segments without decoding them."""
    if isinstance(token, str):
        try:
            raw = token.encode("ascii")
        except UnicodeEncodeError as exc:
            raise TokenEncodingError("token must be ASCII") from exc
    elif isinstance(token, (bytes, bytearray)):
        raw = bytes(token)
        if not raw.isascii():
            raise TokenEncodingError("token must be ASCII")
    else:
        raise TypeError(f"token must be str or bytes, not {type(token).__name__}")

    if raw.count(b".") != 2:
        raise MalformedTokenError()
    header_segment, payload_segment, signature_segment = raw.split(b".")
    return CompactToken(header_segment, payload_segment, signature_segment)


def decode(token: Union[TokenInput, CompactToken]) -> DecodedToken:
    """Parse a token into header, payload and signature bytes.

    Nothing here is trusted: the signature is not checked and the payload is
    left as raw bytes.
    """
    compact = token if isinstance(token, CompactToken) else split(token)
    header_bytes = b64url_decode(compact.header_segment)
    payload = b64url_decode(compact.payload_segment)
    signature = b64url_decode(compact.signature_segment)

    try:
        header_obj = json.loads(header_bytes)
    except ValueError as exc:
        raise MalformedTokenError("header is not valid JSON") from exc
    if not isinstance(header_obj, dict):
        raise MalformedTokenError("header is not a JSON object")
    try:
        header = Header.from_json_object(header_obj)
    except (TypeError, ValueError) as exc:
        raise MalformedTokenError(f"header is invalid: {exc}") from exc

    return DecodedToken(
        compact=compact,
        header=header,
        header_bytes=header_bytes,
        payload=payload,
        signature=signature,
    )


decode_unverified = decode


def join(prefix: bytes, signature: bytes) -> str:
    """Append the encoded signature to a signed ``header.payload`` prefix."""
    return (prefix + b"." + b64url_encode(signature)).decode("ascii")
