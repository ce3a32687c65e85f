import math

import pytest

from resolink.floats import decode_float, encode_float, to_single


def assert_bi_eq_json(value, expected, single=True):
    assert encode_float(value) == expected
    assert decode_float(expected, single) == value


def test_float_num():
    assert_bi_eq_json(1.0, 1.0)


def test_nan():
    assert encode_float(math.nan) == "NaN"
    assert math.isnan(decode_float("NaN", True))


def test_inf():
    assert_bi_eq_json(math.inf, "Infinity")


def test_neg_inf():
    assert_bi_eq_json(-math.inf, "-Infinity")


def test_integer_decodes_to_float():
    value = decode_float(2, False)
    assert value == 2.0
    assert isinstance(value, float)


def test_single_rounding():
    assert to_single(0.1) == 0.10000000149011612
    assert decode_float(0.1, True) == 0.10000000149011612
    assert decode_float(0.1, False) == 0.1


def test_single_overflow_saturates():
    assert to_single(1e300) == math.inf
    assert to_single(-1e300) == -math.inf


def test_negative_zero_keeps_sign():
    assert math.copysign(1.0, encode_float(-0.0)) == -1.0


@pytest.mark.parametrize("raw", ["abc", "inf", True, None, [1.0], {"x": 1}])
def test_invalid_values_rejected(raw):
    with pytest.raises(ValueError):
        decode_float(raw, True)