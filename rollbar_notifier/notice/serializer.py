"""Deterministic JSON serialization of payload envelopes."""

from __future__ import annotations

import datetime
import json
from collections.abc import Mapping
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel

from rollbar_notifier.core.config import SerializerConfig
from rollbar_notifier.core.exceptions import SerializationError
from rollbar_notifier.notice.types import PayloadEnvelope

class _NoticeEncoder(json.JSONEncoder):
    """Renders custom data of arbitrary shape instead of raising TypeError."""

    def __init__(
        self,
        *args: Any,
        date_format: str | None = None,
        enum_as_string: bool = True,
        **kwargs: Any,
    ) -> None:
        super().__init__(*args, **kwargs)
        self._date_format = date_format
        self._enum_as_string = enum_as_string

    def default(self, o: Any) -> Any:
        if isinstance(o, (datetime.datetime, datetime.date, datetime.time)):
            if self._date_format:
                return o.strftime(self._date_format)
            return o.isoformat()
        if isinstance(o, Enum):
            return o.value if self._enum_as_string else o.name
        if isinstance(o, Decimal):
            return str(o)
        if isinstance(o, (set, frozenset)):
            # Sorted so identical sets always produce identical bytes.
            return sorted(o, key=repr)
        if isinstance(o, (bytes, bytearray)):
            return bytes(o).decode("utf-8", errors="replace")
        if isinstance(o, BaseModel):
            return o.model_dump(mode="python", by_alias=True)
        return repr(o)


def _plain_custom(
    value: Any, enum_as_string: bool, _active: set[int] | None = None
) -> Any:
    """Copy of custom data that ``json`` can dump with sorted keys.

    Mapping keys become strings at every depth and enum members (including
    ``StrEnum``/``IntEnum``, which ``json`` would write without consulting
    the encoder) become their value or name.
    """
    if isinstance(value, Enum):
        return value.value if enum_as_string else value.name
    if not isinstance(value, (Mapping, list, tuple)):
        return value

    active = _active if _active is not None else set()
    if id(value) in active:
        raise ValueError("Circular reference detected")
    active.add(id(value))
    try:
        if isinstance(value, Mapping):
            return {
                _plain_key(k, enum_as_string): _plain_custom(v, enum_as_string, active)
                for k, v in value.items()
            }
        return [_plain_custom(v, enum_as_string, active) for v in value]
    finally:
        active.discard(id(value))


def _plain_key(key: Any, enum_as_string: bool) -> str:
    if isinstance(key, Enum):
        return str(key.value if enum_as_string else key.name)
    return key if isinstance(key, str) else str(key)


class PayloadSerializer:
    """Converts a :class:`PayloadEnvelope` to encoded JSON bytes.

    Output is byte-identical for identical input and options: keys are
    sorted (unless disabled) and separators are compact.
    """

    def __init__(self, config: SerializerConfig, encoding: str = "utf-8") -> None:
        self._config = config
        self._encoding = encoding

    @property
    def encoding(self) -> str:
        return self._encoding

    def to_dict(self, envelope: PayloadEnvelope) -> dict[str, Any]:
        """Plain-dict form of *envelope* with unset optional fields dropped.

        ``custom`` is attached separately so keys holding ``None`` survive.
        """
        doc = envelope.model_dump(
            by_alias=True,
            exclude_none=True,
            exclude={"data": {"custom"}},
        )
        doc["data"]["custom"] = _plain_custom(
            envelope.data.custom, self._config.enum_as_string
        )
        return doc

    def serialize(self, envelope: PayloadEnvelope) -> bytes:
        """Serialize *envelope* to bytes in the configured encoding.

        Raises:
            SerializationError: The object graph cannot be rendered as JSON
                (e.g. a circular reference) or the text cannot be encoded.
        """
        try:
            text = json.dumps(
                self.to_dict(envelope),
                cls=_NoticeEncoder,
                date_format=self._config.date_format,
                enum_as_string=self._config.enum_as_string,
                sort_keys=self._config.sort_keys,
                separators=(",", ":"),
                ensure_ascii=False,
            )
            return text.encode(self._encoding)
        except (TypeError, ValueError, RecursionError, LookupError) as exc:
            raise SerializationError(
                f"cannot serialize notice {envelope.data.uuid}: {type(exc).__name__}"
            ) from exc
