"""Requests sent to the link server and the envelope that carries their IDs."""

from __future__ import annotations

from dataclasses import dataclass
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


def _string(value, key):
    if not isinstance(value, str):
        raise ValueError(f"expected a string for {key!r}, got {value!r}")
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


def _get(obj, key, check):
    return check(_require(obj, key), key)


def _slot(data):
    if not isinstance(data, Slot):
        raise ValueError(f"expected a Slot, got {data!r}")
    return data.to_json()


def _component(data):
    if not isinstance(data, Component):
        raise ValueError(f"expected a Component, got {data!r}")
    return data.to_json()


@dataclass
class GetSlot:
    """Fetch a slot; ``depth`` -1 fetches the whole hierarchy fully."""

    slot_id: str
    depth: int
    include_component_data: bool

    _TAG = "getSlot"

    def _payload(self):
        return {
            "slotId": _string(self.slot_id, "slotId"),
            "depth": _int32(self.depth, "depth"),
            "includeComponentData": _boolean(self.include_component_data, "includeComponentData"),
        }

    @classmethod
    def _parse(cls, obj):
        return cls(
            slot_id=_get(obj, "slotId", _string),
            depth=_get(obj, "depth", _int32),
            include_component_data=_get(obj, "includeComponentData", _boolean),
        )


@dataclass
class AddSlot:
    """Create a slot from the given data."""

    data: Slot

    _TAG = "addSlot"

    def _payload(self):
        return {"data": _slot(self.data)}

    @classmethod
    def _parse(cls, obj):
        return cls(data=Slot.from_json(_require(obj, "data")))


@dataclass
class UpdateSlot:
    """Update an existing slot; its ID must be set."""

    data: Slot

    _TAG = "updateSlot"

    def _payload(self):
        return {"data": _slot(self.data)}

    @classmethod
    def _parse(cls, obj):
        return cls(data=Slot.from_json(_require(obj, "data")))


@dataclass
class RemoveSlot:
    """Remove the slot with the given ID."""

    slot_id: str

    _TAG = "removeSlot"

    def _payload(self):
        return {"slotId": _string(self.slot_id, "slotId")}

    @classmethod
    def _parse(cls, obj):
        return cls(slot_id=_get(obj, "slotId", _string))


@dataclass
class GetComponent:
    """Fetch the component with the given ID."""

    component_id: str

    _TAG = "getComponent"

    def _payload(self):
        return {"componentId": _string(self.component_id, "componentId")}

    @classmethod
    def _parse(cls, obj):
        return cls(component_id=_get(obj, "componentId", _string))


@dataclass
class AddComponent:
    """Add a component to the slot ``container_slot_id``."""

    data: Component
    container_slot_id: str

    _TAG = "addComponent"

    def _payload(self):
        return {
            "data": _component(self.data),
            "containerSlotId": _string(self.container_slot_id, "containerSlotId"),
        }

    @classmethod
    def _parse(cls, obj):
        return cls(
            data=Component.from_json(_require(obj, "data")),
            container_slot_id=_get(obj, "containerSlotId", _string),
        )


@dataclass
class UpdateComponent:
    """Update an existing component; its ID must be set."""

    data: Component

    _TAG = "updateComponent"

    def _payload(self):
        return {"data": _component(self.data)}

    @classmethod
    def _parse(cls, obj):
        return cls(data=Component.from_json(_require(obj, "data")))


@dataclass
class RemoveComponent:
    """Remove the component with the given ID."""

    component_id: str

    _TAG = "removeComponent"

    def _payload(self):
        return {"componentId": _string(self.component_id, "componentId")}

    @classmethod
    def _parse(cls, obj):
        return cls(component_id=_get(obj, "componentId", _string))


Message = Union[
    GetSlot,
    AddSlot,
    UpdateSlot,
    RemoveSlot,
    GetComponent,
    AddComponent,
    UpdateComponent,
    RemoveComponent,
]

_MESSAGE_TYPES = {
    cls._TAG: cls
    for cls in (
        GetSlot,
        AddSlot,
        UpdateSlot,
        RemoveSlot,
        GetComponent,
        AddComponent,
        UpdateComponent,
        RemoveComponent,
    )
}


def message_to_json(message):
    """Encode a message as a JSON object tagged with its ``$type``."""
    if type(message) not in _MESSAGE_TYPES.values():
        raise TypeError(f"not a message: {message!r}")
    return {"$type": message._TAG, **message._payload()}


def message_from_json(data):
    """Decode a JSON object tagged with ``$type`` into a message."""
    obj = _expect_object(data, "message")
    tag = _require(obj, "$type")
    try:
        cls = _MESSAGE_TYPES[tag]
    except (KeyError, TypeError):
        raise ValueError(f"unknown message type {tag!r}") from None
    return cls._parse(obj)


@dataclass
class MessageWrapper:
    """A message together with the unique ID its response will carry."""

    inner: Message
    message_id: str

    def to_json(self):
        return {
            **message_to_json(self.inner),
            "messageId": _string(self.message_id, "messageId"),
        }

    @classmethod
    def from_json(cls, data):
        obj = _expect_object(data, "MessageWrapper")
        return cls(inner=message_from_json(obj), message_id=_get(obj, "messageId", _string))