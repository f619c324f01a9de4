"""Go source emission of the status code -> message table.

The generated file looks like::

    /****...  Interbase Public License header  ...****/

    package firebirdsql

    var errmsgs = map[int]string{
    	335544321: "arithmetic exception, numeric overflow, or string truncation\\n",
    	...
    }

Entries keep input order. A status code defined twice yields two entries;
consumers of the map keep the last one.
"""
from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Iterable, TextIO

from fbmsggen.backend.constants import DEFAULT_PACKAGE, DEFAULT_VARIABLE, LICENSE_HEADER
from fbmsggen.internals.errors import CatalogError
from fbmsggen.semantics.records import MessageRecord


class OutputWriteFailure(CatalogError):
    """The generated table could not be written to its destination."""

    def __init__(self, path, reason: str):
        super().__init__("GE3001", path=str(path), reason=reason)
        self.path = path
        self.reason = reason


_GO_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\t": "\\t",
    "\r": "\\r",
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\v": "\\v",
}


def go_quote(text: str) -> str:
    """Render ``text`` as a Go interpreted string literal."""
    out = []
    for ch in text:
        esc = _GO_ESCAPES.get(ch)
        if esc is not None:
            out.append(esc)
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            out.append(f"\\x{ord(ch):02x}")
        elif "\udc80" <= ch <= "\udcff":
            # Raw byte from a C numeric escape
            out.append(f"\\x{ord(ch) - 0xDC00:02x}")
        else:
            out.append(ch)
    return '"' + "".join(out) + '"'


def format_entry(record: MessageRecord) -> str:
    text = record.text if record.text.endswith("\n") else record.text + "\n"
    return f"\t{record.code}: {go_quote(text)},\n"


def emit(records: Iterable[MessageRecord], out: TextIO,
         package: str = DEFAULT_PACKAGE, variable: str = DEFAULT_VARIABLE) -> int:
    """Write the complete Go source to ``out``. Returns the number of entries."""
    out.write(LICENSE_HEADER)
    out.write("\n")
    out.write(f"package {package}\n\n")
    out.write(f"var {variable} = map[int]string{{\n")
    count = 0
    for record in records:
        out.write(format_entry(record))
        count += 1
    out.write("}\n")
    return count


def write_table(records: Iterable[MessageRecord], output_path: Path,
                package: str = DEFAULT_PACKAGE, variable: str = DEFAULT_VARIABLE) -> int:
    """Atomically (re)create ``output_path`` with the generated table.

    The table is written to a temporary file next to the target and renamed
    over it, so the target is either the previous file or the complete new
    one.

    Raises:
        OutputWriteFailure: GE3001 if the directory or file cannot be written.
    """
    output_path = Path(output_path)
    directory = output_path.parent

    try:
        fd, tmp_name = tempfile.mkstemp(prefix=f".{output_path.name}.", suffix=".tmp",
                                        dir=directory)
    except OSError as e:
        raise OutputWriteFailure(output_path, e.strerror or str(e)) from e

    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            count = emit(records, f, package=package, variable=variable)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, output_path)
    except OSError as e:
        Path(tmp_name).unlink(missing_ok=True)
        raise OutputWriteFailure(output_path, e.strerror or str(e)) from e
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise

    return count
