"""Facility name to number resolution."""
from __future__ import annotations

from typing import Dict, Mapping, Optional, Union

FACILITY_PREFIX = "FB_IMPL_MSG_FACILITY_"

# Values from firebird/impl/msg_helper.h
DEFAULT_FACILITIES: Dict[str, int] = {
    "JRD": 0,
    "QLI": 1,
    "GFIX": 3,
    "GPRE": 4,
    "DSQL": 7,
    "DYN": 8,
    "INSTALL": 10,
    "TEST": 11,
    "GBAK": 12,
    "SQLERR": 13,
    "SQLWARN": 14,
    "JRD_BUGCHK": 15,
    "ISQL": 17,
    "GSEC": 18,
    "GSTAT": 21,
    "FBSVCMGR": 22,
    "UTL": 23,
    "NBACKUP": 24,
    "FBTRACEMGR": 25,
    "JAYBIRD": 26,
    "R2DBC_FIREBIRD": 27,
}


def normalize_name(name: str) -> str:
    name = name.strip()
    if name.startswith(FACILITY_PREFIX):
        name = name[len(FACILITY_PREFIX):]
    return name.upper()


def parse_int(text: str) -> int:
    """Parse a C integer literal: optional sign, decimal, octal or 0x hex, u/l suffixes."""
    digits = text.rstrip("uUlL")
    body = digits.lstrip("+-")
    if len(body) > 1 and body[0] == "0" and body[1] not in "xX":
        return int(digits, 8)
    return int(digits, 0)


class FacilityTable:
    """Maps facility names to numbers.

    Later definitions override earlier ones, so the table is seeded with
    the upstream defaults and then updated from header #defines and
    configuration, in that order.
    """

    def __init__(self, initial: Optional[Mapping[str, int]] = None) -> None:
        self._by_name: Dict[str, int] = {}
        self.update(DEFAULT_FACILITIES if initial is None else initial)

    def define(self, name: str, value: int) -> None:
        self._by_name[normalize_name(name)] = value

    def update(self, values: Mapping[str, int]) -> None:
        for name, value in values.items():
            self.define(name, value)

    def resolve(self, facility: Union[str, int]) -> Optional[int]:
        """Return the facility number, or None when the name is unknown."""
        if isinstance(facility, int):
            return facility
        text = facility.strip()
        try:
            return parse_int(text)
        except ValueError:
            pass
        return self._by_name.get(normalize_name(text))

    def name_of(self, value: int) -> Optional[str]:
        for name, number in self._by_name.items():
            if number == value:
                return name
        return None
