"""Generation pipeline: load definitions, pack status codes, write the table."""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from fbmsggen.backend import status_code as sc
from fbmsggen.backend.emitter import OutputWriteFailure, write_table
from fbmsggen.compiler.config import GeneratorConfig
from fbmsggen.compiler.loader import DefinitionLoader
from fbmsggen.internals import errors as er
from fbmsggen.internals.report import Reporter
from fbmsggen.semantics.facilities import FacilityTable
from fbmsggen.semantics.records import KIND_DATA, MessageDefinition, MessageRecord


def _location(d: MessageDefinition) -> str:
    where = d.filename or "<input>"
    return f"{where}:{d.loc.line}" if d.loc else where


def select_definitions(definitions: Iterable[MessageDefinition],
                       macros: Iterable[str]) -> List[MessageDefinition]:
    """Keep data file entries and header entries whose macro is enabled."""
    enabled = set(macros)
    return [d for d in definitions if d.kind == KIND_DATA or d.kind in enabled]


def build_records(definitions: Iterable[MessageDefinition], facilities: FacilityTable,
                  reporter: Reporter) -> List[MessageRecord]:
    """Pack each definition into a MessageRecord, preserving order.

    Definitions with an unknown facility are reported (GE1002) and skipped.
    Truncation and duplicate codes are reported as warnings only; the
    records are still produced.
    """
    records: List[MessageRecord] = []
    first_seen: Dict[int, MessageDefinition] = {}

    for d in definitions:
        facility = facilities.resolve(d.facility)
        if facility is None:
            er.emit(reporter, er.ERR.GE1002, d.loc, filename=d.filename, facility=d.facility)
            continue

        if facility & ~sc.FACILITY_MASK:
            er.emit(reporter, er.ERR.GW1001, d.loc, filename=d.filename,
                    facility=d.facility, value=facility, masked=facility & sc.FACILITY_MASK)
        if d.number & ~sc.CODE_MASK:
            er.emit(reporter, er.ERR.GW1002, d.loc, filename=d.filename,
                    number=d.number, masked=d.number & sc.CODE_MASK)

        code = sc.encode(facility, d.number)
        if code in first_seen:
            er.emit(reporter, er.ERR.GW1003, d.loc, filename=d.filename,
                    code=code, prev_loc=_location(first_seen[code]))
        else:
            first_seen[code] = d

        records.append(MessageRecord(code, d.text))

    return records


def generate(config: GeneratorConfig, reporter: Reporter, dump_parse: bool = False) -> int:
    """Run the whole generation for ``config``.

    Returns:
        Exit code (0=table written, 2=errors; nothing is written on errors).
    """
    if not config.inputs:
        er.emit(reporter, er.ERR.GE3003, None)
        return 2

    loader = DefinitionLoader(reporter, include_dirs=config.include_dirs, dump_parse=dump_parse)
    loader.load_all(config.inputs)
    if reporter.has_errors:
        return 2

    facilities = FacilityTable()
    facilities.update(loader.facilities)
    facilities.update(config.facilities)

    definitions = select_definitions(loader.definitions, config.macros)
    records = build_records(definitions, facilities, reporter)
    if reporter.has_errors:
        return 2

    try:
        count = write_table(records, config.output, package=config.package,
                            variable=config.variable)
    except OutputWriteFailure as e:
        e.report(reporter)
        return 2

    skipped = len(loader.definitions) - len(definitions)
    note = f" ({skipped} definitions skipped by macro filter)" if skipped else ""
    print(f"Generated: {config.output} ({count} messages){note}")
    return 0


def describe_code(packed: int, facilities: Optional[FacilityTable] = None) -> str:
    """One-line breakdown of a packed status code."""
    facilities = facilities or FacilityTable()
    parts = sc.decode(packed)
    name = facilities.name_of(parts.facility) or "?"
    tag = "" if sc.is_status_code(packed) else " (not an ISC status code)"
    return f"{packed} = 0x{packed:08X}: facility {parts.facility} ({name}), code {parts.code}{tag}"
