"""Input file loading: message headers with their includes, legacy msgs.h tables and TOML data files."""
from __future__ import annotations

import dataclasses
import re
import tomllib
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from fbmsggen.backend import status_code as sc
from fbmsggen.internals import errors as er
from fbmsggen.internals.parse_errors import handle_parse_exception
from fbmsggen.internals.parser import parse_header
from fbmsggen.internals.report import Reporter, Span
from fbmsggen.semantics.facilities import normalize_name
from fbmsggen.semantics.records import (
    FacilityDefine, Include, MessageDefinition, KIND_DATA,
)
from fbmsggen.semantics.string_processing import parse_string_tokens

DATA_FILE_SUFFIX = ".toml"


class DataFileError(er.CatalogError):
    def __init__(self, path, reason: str):
        super().__init__("GE2004", path=str(path), reason=reason)
        self.reason = reason


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def parse_data_file(data: dict, source: str) -> Tuple[Dict[str, int], List[MessageDefinition]]:
    """Validate the contents of a TOML message data file.

    Layout::

        [facilities]          # optional
        JRD = 0

        [[message]]
        facility = "JRD"      # name or number
        number = 1
        symbol = "bad_dbkey"  # optional
        text = "invalid database key"

    Raises:
        DataFileError: GE2004 on any schema violation.
    """
    facilities = data.get("facilities", {})
    if not isinstance(facilities, dict):
        raise DataFileError(source, "[facilities] must be a table")
    for name, value in facilities.items():
        if not _is_int(value):
            raise DataFileError(source, f"facility '{name}' must be an integer")

    messages = data.get("message", [])
    if not isinstance(messages, list):
        raise DataFileError(source, "'message' must be an array of tables ([[message]])")

    definitions: List[MessageDefinition] = []
    for index, entry in enumerate(messages, 1):
        if not isinstance(entry, dict):
            raise DataFileError(source, f"message #{index} must be a table")
        missing = [k for k in ("facility", "number", "text") if k not in entry]
        if missing:
            raise DataFileError(source, f"message #{index} is missing {', '.join(missing)}")

        facility = entry["facility"]
        if not (_is_int(facility) or isinstance(facility, str)):
            raise DataFileError(source, f"message #{index}: facility must be a name or an integer")
        if not _is_int(entry["number"]):
            raise DataFileError(source, f"message #{index}: number must be an integer")
        if not isinstance(entry["text"], str):
            raise DataFileError(source, f"message #{index}: text must be a string")
        symbol = entry.get("symbol")
        if symbol is not None and not isinstance(symbol, str):
            raise DataFileError(source, f"message #{index}: symbol must be a string")

        definitions.append(MessageDefinition(
            facility=facility,
            number=entry["number"],
            text=entry["text"],
            symbol=symbol,
            kind=KIND_DATA,
            filename=source,
        ))

    return dict(facilities), definitions


# Legacy gen/msgs.h: a C array of {code_number, code_text} pairs with the
# status codes already packed, terminated by {0, NULL}
_LEGACY_MARKER_RE = re.compile(r"\bcode_number\b")
_LEGACY_ENTRY_RE = re.compile(
    r'\{\s*(\d+)[lLuU]*\s*,\s*((?:"(?:[^"\\\n]|\\.)*"\s*)+)\}'
)
_STRING_RE = re.compile(r'"(?:[^"\\\n]|\\.)*"')


def is_legacy_table(src: str) -> bool:
    return bool(_LEGACY_MARKER_RE.search(src))


def parse_legacy_table(src: str, source: str) -> List[MessageDefinition]:
    """Read the pre-packed message table of a legacy ``msgs.h``.

    Raises:
        DataFileError: GE2004 when an entry is not an ISC status code.
        InvalidEscapeError: GE1001 for a bad escape in a text.
    """
    definitions: List[MessageDefinition] = []
    for match in _LEGACY_ENTRY_RE.finditer(src):
        start = match.start()
        line = src.count("\n", 0, start) + 1
        col = start - src.rfind("\n", 0, start)
        loc = Span(line, col, line, col)
        packed = int(match.group(1))
        parts = sc.decode(packed)
        if not sc.is_status_code(packed) or sc.encode(*parts) != packed:
            raise DataFileError(source, f"{packed} at line {line} is not an ISC status code")
        definitions.append(MessageDefinition(
            facility=parts.facility,
            number=parts.code,
            text=parse_string_tokens(_STRING_RE.findall(match.group(2)), loc),
            kind=KIND_DATA,
            loc=loc,
            filename=source,
        ))
    return definitions


class DefinitionLoader:
    """Collects message definitions from input files, in input order.

    Headers have their ``#include`` directives expanded in place. Each
    header is read at most once per loader.
    """

    def __init__(self, reporter: Reporter, include_dirs: Iterable[Path] = (),
                 dump_parse: bool = False) -> None:
        self.reporter = reporter
        self.include_dirs = [Path(d) for d in include_dirs]
        self.dump_parse = dump_parse
        self.definitions: List[MessageDefinition] = []
        # Facility values seen in headers and data files; later ones win
        self.facilities: Dict[str, int] = {}
        self._loaded: set[Path] = set()

    def load(self, path: Path) -> bool:
        """Load one input file. Returns False if it produced errors."""
        path = Path(path)
        before = len(self.definitions)

        if path.resolve() in self._loaded:
            return True

        if path.suffix == DATA_FILE_SUFFIX:
            ok = self.load_data_file(path)
        else:
            ok = self.load_header(path)

        if ok and len(self.definitions) == before:
            er.emit(self.reporter, er.ERR.GW2001, None, filename=str(path), path=path)
        return ok

    def load_all(self, paths: Iterable[Path]) -> bool:
        ok = True
        for path in paths:
            ok = self.load(path) and ok
        return ok

    # ------------------------------------------------------------------
    # Headers
    # ------------------------------------------------------------------

    def resolve_include(self, name: str, including_dir: Path) -> Tuple[Optional[Path], List[Path]]:
        """Find an included header. Returns (path or None, candidates searched)."""
        if Path(name).is_absolute():
            candidates = [Path(name)]
        else:
            candidates = [including_dir / name] + [d / name for d in self.include_dirs]
        for candidate in candidates:
            if candidate.is_file():
                return candidate, candidates
        return None, candidates

    def load_header(self, path: Path) -> bool:
        resolved = path.resolve()
        if resolved in self._loaded:
            return True
        self._loaded.add(resolved)

        filename = str(path)
        try:
            src = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            reason = getattr(e, "strerror", None) or str(e)
            er.emit(self.reporter, er.ERR.GE2003, None, filename=filename, path=path, reason=reason)
            return False

        if is_legacy_table(src):
            return self.load_legacy_table(src, filename)

        try:
            unit, _ = parse_header(src, dump_parse=self.dump_parse)
        except Exception as exc:
            if handle_parse_exception(exc, self.reporter, source_path=path):
                return False
            raise

        if src and not src.endswith('\n'):
            er.emit(self.reporter, er.ERR.GW0001, None, filename=filename)

        ok = True
        for item in unit.items:
            if isinstance(item, MessageDefinition):
                self.definitions.append(dataclasses.replace(item, filename=filename))
            elif isinstance(item, FacilityDefine):
                self.facilities[normalize_name(item.name)] = item.value
            elif isinstance(item, Include):
                target, searched = self.resolve_include(item.path, path.parent)
                if target is None:
                    er.emit(self.reporter, er.ERR.GE2001, item.loc, filename=filename,
                            path=item.path, paths=", ".join(str(p) for p in searched))
                    ok = False
                    continue
                ok = self.load_header(target) and ok
        return ok

    # ------------------------------------------------------------------
    # Data files
    # ------------------------------------------------------------------

    def load_data_file(self, path: Path) -> bool:
        self._loaded.add(path.resolve())
        filename = str(path)
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except OSError as e:
            er.emit(self.reporter, er.ERR.GE2003, None, filename=filename,
                    path=path, reason=e.strerror or str(e))
            return False
        except tomllib.TOMLDecodeError as e:
            er.emit(self.reporter, er.ERR.GE2004, None, filename=filename, path=path, reason=str(e))
            return False

        try:
            facilities, definitions = parse_data_file(data, filename)
        except DataFileError as e:
            e.report(self.reporter, filename=filename)
            return False

        self.facilities.update((normalize_name(k), v) for k, v in facilities.items())
        self.definitions.extend(definitions)
        return True

    def load_legacy_table(self, src: str, filename: str) -> bool:
        try:
            definitions = parse_legacy_table(src, filename)
        except er.CatalogError as e:
            e.report(self.reporter, filename=filename)
            return False
        self.definitions.extend(definitions)
        return True
