"""Explicit field descriptors for decoding claims into structured records."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Callable, Dict, FrozenSet, Mapping, Optional, Sequence, Tuple

from ..errors import ClaimsDecodeError, MissingRequiredFieldError


def is_zero(value: Any) -> bool:
    """Return True for values treated as "not provided" by strict decoding."""
    if value is None:
        return True
    if isinstance(value, (str, list, dict, tuple)):
        return len(value) == 0
    if isinstance(value, (bool, int, float)):
        return not value
    return False


@dataclass(frozen=True)
class ClaimField:
    """Maps one JSON claim onto one attribute of a record."""

    name: str
    attr: Optional[str] = None
    required: bool = False

    @property
    def target(self) -> str:
        return self.attr or self.name


class RecordSchema:
    """Describes how a structured record is dumped to and loaded from claims.

    ``factory`` is called with keyword arguments named after each field's
    ``target``; it is usually the record class itself.
    """

    def __init__(
        self,
        factory: Callable[..., Any],
        fields: Sequence[ClaimField],
        *,
        fill_missing: FrozenSet[str] = frozenset(),
    ) -> None:
        self.factory = factory
        self.fields: Tuple[ClaimField, ...] = tuple(fields)
        self._fill_missing = fill_missing

    @classmethod
    def from_dataclass(cls, record_type: type) -> "RecordSchema":
        """Build a schema from dataclass fields.

        A field's JSON name defaults to its attribute name and may be changed
        with ``metadata={"claim": "..."}``; ``metadata={"required": True}``
        marks it required for strict decoding.
        """
        return _dataclass_schema(record_type)

    def dump(self, record: Any) -> Dict[str, Any]:
        claims: Dict[str, Any] = {}
        for field in self.fields:
            value = getattr(record, field.target, None)
            if value is not None:
                claims[field.name] = value
        return claims

    def load(self, data: Mapping[str, Any], *, strict: bool = False) -> Any:
        kwargs: Dict[str, Any] = {}
        for field in self.fields:
            if strict and field.required and is_zero(data.get(field.name)):
                raise MissingRequiredFieldError(field.name)
            if field.name in data:
                kwargs[field.target] = data[field.name]
            elif field.target in self._fill_missing:
                kwargs[field.target] = None
        try:
            return self.factory(**kwargs)
        except (TypeError, ValueError) as exc:
            raise ClaimsDecodeError(f"could not build {getattr(self.factory, '__name__', 'record')}: {exc}") from exc

    def bind(self, record: Any) -> "BoundRecord":
        return BoundRecord(record=record, schema=self)


@dataclass(frozen=True)
class BoundRecord:
    """A record paired with the schema used to turn it into claims."""

    record: Any
    schema: RecordSchema

    def to_claims(self) -> Dict[str, Any]:
        return self.schema.dump(self.record)


@lru_cache(maxsize=256)
def _dataclass_schema(record_type: type) -> RecordSchema:
    if not (isinstance(record_type, type) and dataclasses.is_dataclass(record_type)):
        raise TypeError(f"{record_type!r} is not a dataclass type")
    fields = []
    fill_missing = set()
    for item in dataclasses.fields(record_type):
        if not item.init:
            continue
        fields.append(
            ClaimField(
                name=item.metadata.get("claim", item.name),
                attr=item.name,
                required=bool(item.metadata.get("required", False)),
            )
        )
        if item.default is dataclasses.MISSING and item.default_factory is dataclasses.MISSING:
            fill_missing.add(item.name)
    return RecordSchema(record_type, fields, fill_missing=frozenset(fill_missing))
