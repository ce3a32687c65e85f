"""Float encoding on the wire: plain JSON numbers, with NaN and the infinities as strings."""

import math
import struct

_SPECIAL = {
    "Infinity": math.inf,
    "-Infinity": -math.inf,
    "NaN": math.nan,
}


def to_single(value):
    """Round ``value`` to the nearest single-precision float, saturating to infinity."""
    try:
        value = float(value)
    except OverflowError:
        return -math.inf if value < 0 else math.inf
    try:
        return struct.unpack("<f", struct.pack("<f", value))[0]
    except OverflowError:
        return -math.inf if value < 0 else math.inf


def encode_float(value):
    """Encode a float as a JSON value, using strings for NaN and the infinities."""
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    return value


def decode_float(raw, single=False):
    """Decode a JSON value into a float; ``single`` rounds it to single precision."""
    if isinstance(raw, bool):
        raise ValueError(f"expected a float, including Infinity, -Infinity, or NaN, got {raw!r}")
    if isinstance(raw, (int, float)):
        try:
            value = float(raw)
        except OverflowError:
            value = -math.inf if raw < 0 else math.inf
    elif isinstance(raw, str) and raw in _SPECIAL:
        value = _SPECIAL[raw]
    else:
        raise ValueError(f"expected a float, including Infinity, -Infinity, or NaN, got {raw!r}")
    return to_single(value) if single else value