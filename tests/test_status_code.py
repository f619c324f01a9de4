"""Status code packing."""
import pytest

from fbmsggen.backend.status_code import (
    ISC_CODE_TAG, StatusCodeParts, decode, encode, is_status_code,
)

SAMPLE_CODES = list(range(0, 0x4000, 251)) + [0x3FFF]


def test_known_firebird_codes():
    assert encode(0, 1) == 335544321          # isc_arith_except
    assert encode(0, 345) == 335544665        # isc_unique_key_violation
    assert encode(12, 1) == 336330753         # isc_gbak_unknown_switch


def test_scenario_code_999():
    assert encode(0, 999) == ISC_CODE_TAG | 999


@pytest.mark.parametrize("facility", range(32))
def test_tag_bits(facility):
    for code in SAMPLE_CODES:
        packed = encode(facility, code)
        assert packed & (1 << 26)
        assert packed & (1 << 28)
        assert packed & ((1 << 27) | (1 << 29) | (1 << 30) | (1 << 31)) == 0
        assert is_status_code(packed)


@pytest.mark.parametrize("facility, code", [
    (32, 0),
    (33, 5),
    (0xFF, 0x3FFF),
    (-1, 1),
    (3, 0x4000),
    (3, 0x4001),
    (7, -1),
    (1 << 40, 1 << 40),
])
def test_masking_law(facility, code):
    assert encode(facility, code) == encode(facility & 0x1F, code & 0x3FFF)


@pytest.mark.parametrize("facility, code", [(0, 0), (31, 0x3FFF), (12, 1), (40, 0x4005), (-3, -7)])
def test_decode_recovers_masked_parts(facility, code):
    parts = decode(encode(facility, code))
    assert parts == StatusCodeParts(facility & 0x1F, code & 0x3FFF)
    assert parts.facility == (encode(facility, code) >> 16) & 0x1F


def test_packed_value_fits_in_int32():
    assert encode(31, 0x3FFF) < 2 ** 31


def test_is_status_code_rejects_plain_numbers():
    assert not is_status_code(0)
    assert not is_status_code(999)
    assert not is_status_code(0x80000000 | ISC_CODE_TAG)
