"""Packing of (facility, code) pairs into Firebird ISC status codes.

Layout of a packed status code::

    bit  31..29  28   27   26   25..21  20..16     15..14  13..0
         0       1    0    1    0       facility   0       code

Bits 26 and 28 form the fixed ``0x14000000`` tag that marks the value as
an ISC error code. ``335544321`` (arith_except) is JRD facility 0, code 1.
"""
from __future__ import annotations

from typing import NamedTuple

ISC_CODE_TAG = 0x14000000
FACILITY_MASK = 0x1F
FACILITY_SHIFT = 16
CODE_MASK = 0x3FFF

# Bits that are either part of the tag or always clear in a packed code
_TAG_BITS_MASK = 0xFC000000


class StatusCodeParts(NamedTuple):
    facility: int
    code: int


def encode(facility: int, raw_code: int) -> int:
    """Pack a facility and message number into a status code.

    Out-of-range inputs are truncated by masking, never rejected.
    """
    return ((facility & FACILITY_MASK) << FACILITY_SHIFT) | (raw_code & CODE_MASK) | ISC_CODE_TAG


def decode(packed: int) -> StatusCodeParts:
    """Recover the (masked) facility and code from a packed status code."""
    return StatusCodeParts((packed >> FACILITY_SHIFT) & FACILITY_MASK, packed & CODE_MASK)


def is_status_code(value: int) -> bool:
    """True if ``value`` carries the ISC tag and nothing else in the high bits."""
    return (value & _TAG_BITS_MASK) == ISC_CODE_TAG
