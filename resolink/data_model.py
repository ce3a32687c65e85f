"""Data model of a world: slots, components and their members, with JSON mapping."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from dataclasses import field as dc_field
from typing import Any, Callable, Generic, TypeVar

from resolink.floats import decode_float, encode_float, to_single

T = TypeVar("T")

ROOT_SLOT_ID = "Root"


def _identity(value):
    return value


@dataclass(frozen=True)
class _Codec:
    encode: Callable[[Any], Any]
    decode: Callable[[Any], Any]
    coerce: Callable[[Any], Any] = _identity
    optional: bool = False


def _int_codec(low, high):
    def check(value):
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"expected an integer, got {value!r}")
        if not low <= value <= high:
            raise ValueError(f"integer {value} is out of range {low}..{high}")
        return value

    return _Codec(check, check, check)


def _check_bool(value):
    if not isinstance(value, bool):
        raise ValueError(f"expected a boolean, got {value!r}")
    return value


def _check_str(value):
    if not isinstance(value, str):
        raise ValueError(f"expected a string, got {value!r}")
    return value


def _single(value):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"expected a number, got {value!r}")
    return to_single(value)


def _double(value):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"expected a number, got {value!r}")
    return float(value)


def _optional(codec):
    def wrap(fn):
        return lambda value: None if value is None else fn(value)

    return _Codec(wrap(codec.encode), wrap(codec.decode), wrap(codec.coerce), optional=True)


def _struct_codec(cls):
    def check(value):
        if not isinstance(value, cls):
            raise ValueError(f"expected {cls.__name__}, got {value!r}")
        return value

    return _Codec(lambda value: check(value).to_json(), cls.from_json, check)


_U8 = _int_codec(0, 2**8 - 1)
_U16 = _int_codec(0, 2**16 - 1)
_U32 = _int_codec(0, 2**32 - 1)
_U64 = _int_codec(0, 2**64 - 1)
_I8 = _int_codec(-(2**7), 2**7 - 1)
_I16 = _int_codec(-(2**15), 2**15 - 1)
_I32 = _int_codec(-(2**31), 2**31 - 1)
_I64 = _int_codec(-(2**63), 2**63 - 1)
_BOOL = _Codec(_check_bool, _check_bool, _check_bool)
_STR = _Codec(_check_str, _check_str, _check_str)
_OPT_STR = _optional(_STR)
_F32 = _Codec(lambda v: encode_float(_single(v)), lambda raw: decode_float(raw, True), _single)
_F64 = _Codec(lambda v: encode_float(_double(v)), lambda raw: decode_float(raw, False), _double)


def _expect_object(data, what):
    if not isinstance(data, dict):
        raise ValueError(f"expected a JSON object for {what}, got {data!r}")
    return data


def _take_raw(obj, key):
    try:
        return obj[key]
    except KeyError:
        raise ValueError(f"missing field {key!r}") from None


def _take(obj, key, codec):
    if key not in obj and codec.optional:
        return None
    return codec.decode(_take_raw(obj, key))


def _list_or_empty(raw, key):
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ValueError(f"expected a list for {key!r}, got {raw!r}")
    return raw


def _members_from_json(raw):
    if not isinstance(raw, dict):
        raise ValueError(f"expected an object of members, got {raw!r}")
    return {name: Member.from_json(value) for name, value in raw.items()}


def _same(codec, *names):
    return tuple((name, name, codec) for name in names)


class _JsonStruct:
    """Mixin coercing dataclass attributes through the codecs of their JSON keys."""

    _json_fields = ()

    def __post_init__(self):
        for attr, _, codec in self._json_fields:
            setattr(self, attr, codec.coerce(getattr(self, attr)))


def _struct_to_json(obj):
    return {key: codec.encode(getattr(obj, attr)) for attr, key, codec in obj._json_fields}


def _struct_from_json(cls, data):
    obj = _expect_object(data, cls.__name__)
    return cls(**{attr: _take(obj, key, codec) for attr, key, codec in cls._json_fields})


@dataclass
class Int2(_JsonStruct):
    """Two-component 32-bit integer vector."""

    x: int = 0
    y: int = 0
    _json_fields = _same(_I32, "x", "y")

    def to_json(self):
        return _struct_to_json(self)

    @classmethod
    def from_json(cls, data):
        return _struct_from_json(cls, data)


@dataclass
class Int3(_JsonStruct):
    """Three-component 32-bit integer vector."""

    x: int = 0
    y: int = 0
    z: int = 0
    _json_fields = _same(_I32, "x", "y", "z")

    def to_json(self):
        return _struct_to_json(self)

    @classmethod
    def from_json(cls, data):
        return _struct_from_json(cls, data)


@dataclass
class Int4(_JsonStruct):
    """Four-component 32-bit integer vector."""

    x: int = 0
    y: int = 0
    z: int = 0
    w: int = 0
    _json_fields = _same(_I32, "x", "y", "z", "w")

    def to_json(self):
        return _struct_to_json(self)

    @classmethod
    def from_json(cls, data):
        return _struct_from_json(cls, data)


@dataclass
class Float2(_JsonStruct):
    """Two-component single-precision vector."""

    x: float = 0.0
    y: float = 0.0
    _json_fields = _same(_F32, "x", "y")

    def to_json(self):
        return _struct_to_json(self)

    @classmethod
    def from_json(cls, data):
        return _struct_from_json(cls, data)


@dataclass
class Float3(_JsonStruct):
    """Three-component single-precision vector."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    _json_fields = _same(_F32, "x", "y", "z")

    def to_json(self):
        return _struct_to_json(self)

    @classmethod
    def from_json(cls, data):
        return _struct_from_json(cls, data)


@dataclass
class Float4(_JsonStruct):
    """Four-component single-precision vector."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 0.0
    _json_fields = _same(_F32, "x", "y", "z", "w")

    def to_json(self):
        return _struct_to_json(self)

    @classmethod
    def from_json(cls, data):
        return _struct_from_json(cls, data)


@dataclass
class FloatQ(_JsonStruct):
    """Single-precision quaternion."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 0.0
    _json_fields = _same(_F32, "x", "y", "z", "w")

    def to_json(self):
        return _struct_to_json(self)

    @classmethod
    def from_json(cls, data):
        return _struct_from_json(cls, data)


@dataclass
class Color(_JsonStruct):
    """Linear RGBA colour."""

    r: float = 0.0
    g: float = 0.0
    b: float = 0.0
    a: float = 0.0
    _json_fields = _same(_F32, "r", "g", "b", "a")

    def to_json(self):
        return _struct_to_json(self)

    @classmethod
    def from_json(cls, data):
        return _struct_from_json(cls, data)


@dataclass
class ColorX(_JsonStruct):
    """RGBA colour with a colour profile."""

    r: float = 0.0
    g: float = 0.0
    b: float = 0.0
    a: float = 0.0
    profile: str = ""
    _json_fields = _same(_F32, "r", "g", "b", "a") + (("profile", "profile", _STR),)

    def to_json(self):
        return _struct_to_json(self)

    @classmethod
    def from_json(cls, data):
        return _struct_from_json(cls, data)


@dataclass
class Color32(_JsonStruct):
    """8-bit-per-channel RGBA colour."""

    r: int = 0
    g: int = 0
    b: int = 0
    a: int = 0
    _json_fields = _same(_U8, "r", "g", "b", "a")

    def to_json(self):
        return _struct_to_json(self)

    @classmethod
    def from_json(cls, data):
        return _struct_from_json(cls, data)


@dataclass
class Field(Generic[T]):
    """A single value with its unique ID."""

    id: str
    value: T


@dataclass
class ArrayField(Generic[T]):
    """A list of values with its unique ID."""

    id: str = ""
    values: list = dc_field(default_factory=list)


@dataclass
class Empty(_JsonStruct):
    """A member that carries only its ID."""

    id: str = ""
    _json_fields = (("id", "id", _STR),)

    def to_json(self):
        return _struct_to_json(self)

    @classmethod
    def from_json(cls, data):
        return _struct_from_json(cls, data)


@dataclass
class Enum(_JsonStruct):
    """An enum value, named by its type and its value's name."""

    id: str = ""
    value: str = ""
    enum_type: str = ""
    _json_fields = (
        ("id", "id", _STR),
        ("value", "value", _STR),
        ("enum_type", "enumType", _STR),
    )

    def to_json(self):
        return _struct_to_json(self)

    @classmethod
    def from_json(cls, data):
        return _struct_from_json(cls, data)


@dataclass
class Reference(_JsonStruct):
    """A reference to another element, possibly unset."""

    id: str = ""
    target_id: str | None = None
    target_type: str = ""
    _json_fields = (
        ("id", "id", _STR),
        ("target_id", "targetId", _OPT_STR),
        ("target_type", "targetType", _STR),
    )

    def to_json(self):
        return _struct_to_json(self)

    @classmethod
    def from_json(cls, data):
        return _struct_from_json(cls, data)


@dataclass
class SyncList:
    """An ordered list of members."""

    id: str = ""
    elements: list[Member] = dc_field(default_factory=list)

    def to_json(self):
        return {
            "id": _STR.encode(self.id),
            "elements": [element.to_json() for element in self.elements],
        }

    @classmethod
    def from_json(cls, data):
        obj = _expect_object(data, "SyncList")
        elements = _list_or_empty(_take_raw(obj, "elements"), "elements")
        return cls(
            id=_take(obj, "id", _STR),
            elements=[Member.from_json(element) for element in elements],
        )


@dataclass
class SyncObject:
    """A named collection of members."""

    id: str = ""
    members: dict[str, Member] = dc_field(default_factory=dict)

    def to_json(self):
        return {
            "id": _STR.encode(self.id),
            "members": {name: member.to_json() for name, member in self.members.items()},
        }

    @classmethod
    def from_json(cls, data):
        obj = _expect_object(data, "SyncObject")
        return cls(
            id=_take(obj, "id", _STR),
            members=_members_from_json(_take_raw(obj, "members")),
        )


class MemberType(str, enum.Enum):
    """Kinds of component member, valued by their wire tag."""

    REFERENCE = "reference"
    LIST = "list"
    SYNC_OBJECT = "syncObject"
    EMPTY = "empty"
    STRING = "string"
    URI = "Uri"
    ENUM = "enum"
    BYTE = "byte"
    USHORT = "ushort"
    UINT = "uint"
    ULONG = "ulong"
    SBYTE = "sbyte"
    SHORT = "short"
    INT = "int"
    NULL_INT = "int?"
    LONG = "long"
    INT2 = "int2"
    NULL_INT2 = "int2?"
    INT3 = "int3"
    INT4 = "int4"
    FLOAT = "float"
    NULL_FLOAT = "float?"
    DOUBLE = "double"
    BOOL = "bool"
    NULL_BOOL = "bool?"
    COLOR = "color"
    COLOR_X = "colorX"
    NULL_COLOR_X = "colorX?"
    COLOR32 = "color32"
    FLOAT2 = "float2"
    FLOAT3 = "float3"
    FLOAT3_ARRAY = "float3[]"
    NULL_FLOAT3 = "float3?"
    FLOAT4 = "float4"
    FLOATQ = "floatQ"
    NULL_FLOATQ = "floatQ?"
    FLOATQ_ARRAY = "floatQ[]"


@dataclass
class Member:
    """A component member: its kind and the data of that kind."""

    kind: MemberType
    data: Any

    def __post_init__(self):
        self.kind = MemberType(self.kind)
        expected = _expected_class(self.kind)
        if not isinstance(self.data, expected):
            raise TypeError(
                f"member of type {self.kind.value!r} needs {expected.__name__}, "
                f"got {type(self.data).__name__}"
            )

    @property
    def id(self):
        return self.data.id

    def to_json(self):
        if self.kind in _FIELD_CODECS:
            payload = field_to_json(self.data, self.kind)
        elif self.kind in _ARRAY_CODECS:
            codec = _ARRAY_CODECS[self.kind]
            payload = {
                "id": _STR.encode(self.data.id),
                "values": [codec.encode(value) for value in self.data.values],
            }
        else:
            payload = self.data.to_json()
        return {"$type": self.kind.value, **payload}

    @classmethod
    def from_json(cls, data):
        obj = _expect_object(data, "Member")
        tag = _take_raw(obj, "$type")
        try:
            kind = MemberType(tag)
        except (ValueError, TypeError):
            raise ValueError(f"unknown member type {tag!r}") from None
        if kind in _FIELD_CODECS:
            payload = field_from_json(obj, kind)
        elif kind in _ARRAY_CODECS:
            codec = _ARRAY_CODECS[kind]
            values = _take_raw(obj, "values")
            if not isinstance(values, list):
                raise ValueError(f"expected a list for 'values', got {values!r}")
            payload = ArrayField(
                id=_take(obj, "id", _STR),
                values=[codec.decode(value) for value in values],
            )
        else:
            payload = _OBJECT_TYPES[kind].from_json(obj)
        return cls(kind, payload)


@dataclass
class Component:
    """A component attached to a slot."""

    id: str = ""
    is_reference_only: bool = False
    component_type: str = ""
    members: dict[str, Member] = dc_field(default_factory=dict)

    def to_json(self):
        return {
            "id": _STR.encode(self.id),
            "isReferenceOnly": _BOOL.encode(self.is_reference_only),
            "componentType": _STR.encode(self.component_type),
            "members": {name: member.to_json() for name, member in self.members.items()},
        }

    @classmethod
    def from_json(cls, data):
        obj = _expect_object(data, "Component")
        raw_members = _take_raw(obj, "members")
        return cls(
            id=_take(obj, "id", _STR),
            is_reference_only=_take(obj, "isReferenceOnly", _BOOL),
            component_type=_take(obj, "componentType", _STR),
            members={} if raw_members is None else _members_from_json(raw_members),
        )


@dataclass
class Slot:
    """A node of the world hierarchy with its components and children."""

    id: str = ""
    is_reference_only: bool = False
    parent: Reference = dc_field(default_factory=Reference)
    name: Field = dc_field(default_factory=lambda: Field("", None))
    tag: Field = dc_field(default_factory=lambda: Field("", None))
    position: Field = dc_field(default_factory=lambda: Field("", Float3()))
    rotation: Field = dc_field(default_factory=lambda: Field("", FloatQ()))
    scale: Field = dc_field(default_factory=lambda: Field("", Float3()))
    is_active: Field = dc_field(default_factory=lambda: Field("", False))
    is_persistent: Field = dc_field(default_factory=lambda: Field("", False))
    order_offset: Field = dc_field(default_factory=lambda: Field("", 0))
    components: list[Component] = dc_field(default_factory=list)
    children: list[Slot] = dc_field(default_factory=list)

    def is_root_slot(self):
        return self.name.value == ROOT_SLOT_ID

    def to_json(self):
        return {
            "id": _STR.encode(self.id),
            "isReferenceOnly": _BOOL.encode(self.is_reference_only),
            "parent": self.parent.to_json(),
            "name": field_to_json(self.name, MemberType.STRING),
            "tag": field_to_json(self.tag, MemberType.STRING),
            "position": field_to_json(self.position, MemberType.FLOAT3),
            "rotation": field_to_json(self.rotation, MemberType.FLOATQ),
            "scale": field_to_json(self.scale, MemberType.FLOAT3),
            "isActive": field_to_json(self.is_active, MemberType.BOOL),
            "isPersistent": field_to_json(self.is_persistent, MemberType.BOOL),
            "orderOffset": field_to_json(self.order_offset, MemberType.LONG),
            "components": [component.to_json() for component in self.components],
            "children": [child.to_json() for child in self.children],
        }

    @classmethod
    def from_json(cls, data):
        obj = _expect_object(data, "Slot")
        components = _list_or_empty(_take_raw(obj, "components"), "components")
        children = _list_or_empty(_take_raw(obj, "children"), "children")
        return cls(
            id=_take(obj, "id", _STR),
            is_reference_only=_take(obj, "isReferenceOnly", _BOOL),
            parent=Reference.from_json(_take_raw(obj, "parent")),
            name=field_from_json(_take_raw(obj, "name"), MemberType.STRING),
            tag=field_from_json(_take_raw(obj, "tag"), MemberType.STRING),
            position=field_from_json(_take_raw(obj, "position"), MemberType.FLOAT3),
            rotation=field_from_json(_take_raw(obj, "rotation"), MemberType.FLOATQ),
            scale=field_from_json(_take_raw(obj, "scale"), MemberType.FLOAT3),
            is_active=field_from_json(_take_raw(obj, "isActive"), MemberType.BOOL),
            is_persistent=field_from_json(_take_raw(obj, "isPersistent"), MemberType.BOOL),
            order_offset=field_from_json(_take_raw(obj, "orderOffset"), MemberType.LONG),
            components=[Component.from_json(component) for component in components],
            children=[Slot.from_json(child) for child in children],
        )


_FIELD_CODECS = {
    MemberType.STRING: _OPT_STR,
    MemberType.URI: _OPT_STR,
    MemberType.BYTE: _U8,
    MemberType.USHORT: _U16,
    MemberType.UINT: _U32,
    MemberType.ULONG: _U64,
    MemberType.SBYTE: _I8,
    MemberType.SHORT: _I16,
    MemberType.INT: _I32,
    MemberType.NULL_INT: _optional(_I32),
    MemberType.LONG: _I64,
    MemberType.INT2: _struct_codec(Int2),
    MemberType.NULL_INT2: _optional(_struct_codec(Int2)),
    MemberType.INT3: _struct_codec(Int3),
    MemberType.INT4: _struct_codec(Int4),
    MemberType.FLOAT: _F32,
    MemberType.NULL_FLOAT: _optional(_F32),
    MemberType.DOUBLE: _F64,
    MemberType.BOOL: _BOOL,
    MemberType.NULL_BOOL: _optional(_BOOL),
    MemberType.COLOR: _struct_codec(Color),
    MemberType.COLOR_X: _struct_codec(ColorX),
    MemberType.NULL_COLOR_X: _optional(_struct_codec(ColorX)),
    MemberType.COLOR32: _struct_codec(Color32),
    MemberType.FLOAT2: _struct_codec(Float2),
    MemberType.FLOAT3: _struct_codec(Float3),
    MemberType.NULL_FLOAT3: _optional(_struct_codec(Float3)),
    MemberType.FLOAT4: _struct_codec(Float4),
    MemberType.FLOATQ: _struct_codec(FloatQ),
    MemberType.NULL_FLOATQ: _optional(_struct_codec(FloatQ)),
}

_ARRAY_CODECS = {
    MemberType.FLOAT3_ARRAY: _struct_codec(Float3),
    MemberType.FLOATQ_ARRAY: _struct_codec(FloatQ),
}

_OBJECT_TYPES = {
    MemberType.REFERENCE: Reference,
    MemberType.LIST: SyncList,
    MemberType.SYNC_OBJECT: SyncObject,
    MemberType.EMPTY: Empty,
    MemberType.ENUM: Enum,
}


def _expected_class(kind):
    if kind in _FIELD_CODECS:
        return Field
    if kind in _ARRAY_CODECS:
        return ArrayField
    return _OBJECT_TYPES[kind]


def _resolve_codec(codec):
    if isinstance(codec, _Codec):
        return codec
    try:
        return _FIELD_CODECS[MemberType(codec)]
    except (KeyError, ValueError, TypeError):
        raise TypeError(f"{codec!r} does not describe a single-value field") from None


def field_to_json(field, codec):
    """Encode a Field whose value has the kind named by ``codec``."""
    value_codec = _resolve_codec(codec)
    return {"id": _STR.encode(field.id), "value": value_codec.encode(field.value)}


def field_from_json(data, codec):
    """Decode a Field whose value has the kind named by ``codec``."""
    value_codec = _resolve_codec(codec)
    obj = _expect_object(data, "Field")
    return Field(id=_take(obj, "id", _STR), value=_take(obj, "value", value_codec))