"""Responses received from the link server."""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field as dc_field
from typing import Union

from resolink.data_model import Component, Slot

_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1


def _expect_object(data, what):
    if not isinstance(data, dict):
        raise ValueError(f"expected a JSON object for {what}, got {data!r}")
    return data


def _require(obj, key):
    try:
        return obj[key]
    except KeyError:
        raise ValueError(f"missing field {key!r}") from None


def _optional_string(value, key):
    if value is not None and not isinstance(value, str):
        raise ValueError(f"expected a string or null for {key!r}, got {value!r}")
    return value


def _boolean(value, key):
    if not isinstance(value, bool):
        raise ValueError(f"expected a boolean for {key!r}, got {value!r}")
    return value


def _int32(value, key):
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"expected an integer for {key!r}, got {value!r}")
    if not _I32_MIN <= value <= _I32_MAX:
        raise ValueError(f"{key!r} value {value} does not fit in 32 bits")
    return value


@dataclass
class GenericResult:
    """A response that carries no data."""

    _TAG = "response"

    def _payload(self):
        return {}

    @classmethod
    def _parse(cls, obj):
        return cls()


@dataclass
class SlotData:
    """A response carrying a slot hierarchy fetched to ``depth``."""

    depth: int
    data: Slot | None = None

    _TAG = "slotData"

    def _payload(self):
        return {
            "depth": _int32(self.depth, "depth"),
            "data": None if self.data is None else self.data.to_json(),
        }

    @classmethod
    def _parse(cls, obj):
        raw = obj.get("data")
        return cls(
            depth=_int32(_require(obj, "depth"), "depth"),
            data=None if raw is None else Slot.from_json(raw),
        )


@dataclass
class ComponentData:
    """A response carrying a component."""

    data: Component | None = None

    _TAG = "componentData"

    def _payload(self):
        return {"data": None if self.data is None else self.data.to_json()}

    @classmethod
    def _parse(cls, obj):
        raw = obj.get("data")
        return cls(data=None if raw is None else Component.from_json(raw))


ResponseKind = Union[GenericResult, SlotData, ComponentData]

_KINDS = {cls._TAG: cls for cls in (GenericResult, SlotData, ComponentData)}


@dataclass
class Response:
    """A server reply, matched to its request by ``source_message_id``."""

    success: bool
    kind: ResponseKind = dc_field(default_factory=GenericResult)
    source_message_id: str | None = None
    error_info: str | None = None

    def to_json(self):
        if type(self.kind) not in _KINDS.values():
            raise TypeError(f"not a response kind: {self.kind!r}")
        return {
            "$type": self.kind._TAG,
            **self.kind._payload(),
            "sourceMessageId": _optional_string(self.source_message_id, "sourceMessageId"),
            "success": _boolean(self.success, "success"),
            "errorInfo": _optional_string(self.error_info, "errorInfo"),
        }

    @classmethod
    def from_json(cls, data):
        obj = _expect_object(data, "Response")
        if "$type" in obj:
            tag = obj["$type"]
            try:
                kind_cls = _KINDS[tag]
            except (KeyError, TypeError):
                raise ValueError(f"unknown response type {tag!r}") from None
            kind = kind_cls._parse(obj)
        else:
            kind = GenericResult()
        return cls(
            success=_boolean(_require(obj, "success"), "success"),
            kind=kind,
            source_message_id=_optional_string(obj.get("sourceMessageId"), "sourceMessageId"),
            error_info=_optional_string(obj.get("errorInfo"), "errorInfo"),
        )


@dataclass
class FallbackResponse:
    """The common part of a response, for pairing replies whose body could not be read."""

    success: bool
    source_message_id: str | None = None
    error_info: str | None = None

    @classmethod
    def from_json(cls, data):
        obj = _expect_object(data, "FallbackResponse")
        return cls(
            success=_boolean(_require(obj, "success"), "success"),
            source_message_id=_optional_string(obj.get("sourceMessageId"), "sourceMessageId"),
            error_info=_optional_string(obj.get("errorInfo"), "errorInfo"),
        )