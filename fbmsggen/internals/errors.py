# internals/errors.py
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from fbmsggen.internals.report import Span, Reporter


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class Category(str, Enum):
    GENERAL  = "general"
    SYNTAX   = "syntax"
    FACILITY = "facility"
    ENCODING = "encoding"
    INPUT    = "input"
    OUTPUT   = "output"
    CONFIG   = "config"


@dataclass(frozen=True)
class ErrorMessage:
    code: str
    severity: Severity
    text: str
    category: Category = Category.GENERAL
    doc: str = ""


REGISTRY: Dict[str, ErrorMessage] = {}

class _ErrorCatalog:
    def __init__(self, backing: Dict[str, ErrorMessage]) -> None:
        self._registry = backing

    def __getattr__(self, name: str) -> ErrorMessage:
        try:
            return self._registry[name]
        except KeyError as e:
            raise AttributeError(name) from e

    def __getitem__(self, code: str) -> ErrorMessage:
        return self._registry[code]


ERR = _ErrorCatalog(REGISTRY)

def emit(r: Reporter, em: ErrorMessage, span: Optional[Span], /,
         filename: Optional[str] = None, **kwargs) -> None:
    text = format_message(em.code, **kwargs)
    if em.severity == Severity.ERROR:
        r.error(em.code, text, span, filename=filename)
    else:
        r.warn(em.code, text, span, filename=filename)


class CatalogError(Exception):
    """Base for exceptions whose text comes from the diagnostic catalog."""

    def __init__(self, code: str, span: Optional[Span] = None, /, **kwargs) -> None:
        self.code = code
        self.span = span
        self.kwargs = kwargs
        self.message = format_message(code, **kwargs)
        super().__init__(f"{code}: {self.message}")

    def report(self, r: Reporter, filename: Optional[str] = None) -> None:
        emit(r, ERR[self.code], self.span, filename=filename, **self.kwargs)


#
# --- Helpers
#

def _add(msg: ErrorMessage) -> None:
    if msg.code in REGISTRY:
        raise ValueError(f"duplicate error code {REGISTRY[msg.code]} in {msg}")
    REGISTRY[msg.code] = msg

def _get(code: str) -> ErrorMessage:
    try:
        return REGISTRY[code]
    except KeyError:
        raise KeyError(f"unknown error code: {code}")

def format_message(code: str, /, **kwargs) -> str:
    msg = _get(code)
    try:
        return msg.text.format(**kwargs)
    except KeyError as key_error:
        missing = key_error.args[0]
        raise KeyError(f"missing text key '{missing}' for {code} "
                       f"(needed by: {msg.text!r})") from None

#
# --- Registry population
#

# Header syntax (GE1xxx)
_add(ErrorMessage("GE1000", Severity.ERROR,
    "syntax error: {detail}",
    Category.SYNTAX, "The header does not follow the FB_IMPL_MSG* macro layout."))

_add(ErrorMessage("GE1001", Severity.ERROR,
    "invalid escape sequence '\\{escape}' in string literal",
    Category.SYNTAX, "Message texts are C string literals; only the standard C escapes are understood."))

_add(ErrorMessage("GE1002", Severity.ERROR,
    "unknown facility '{facility}'",
    Category.FACILITY, "The facility is neither a number nor a name known from the built-in table, "
                       "a FB_IMPL_MSG_FACILITY_* define or the [facilities] configuration."))

# Input files (GE2xxx)
_add(ErrorMessage("GE2001", Severity.ERROR,
    "include file '{path}' not found (searched: {paths})",
    Category.INPUT, "An #include could not be resolved relative to the including header or any include directory."))

_add(ErrorMessage("GE2003", Severity.ERROR,
    "cannot read '{path}': {reason}",
    Category.INPUT, "The input file does not exist, is not readable or is not valid UTF-8."))

_add(ErrorMessage("GE2004", Severity.ERROR,
    "invalid message data file '{path}': {reason}",
    Category.INPUT, "The TOML data file is malformed, a [[message]] entry is missing a required key, "
                    "or a legacy msgs.h table holds a value that is not a packed status code."))

# Output and configuration (GE3xxx)
_add(ErrorMessage("GE3001", Severity.ERROR,
    "cannot write output file '{path}': {reason}",
    Category.OUTPUT, "The generated table could not be written. Any previous file at the path is left untouched."))

_add(ErrorMessage("GE3002", Severity.ERROR,
    "invalid configuration '{path}': {reason}",
    Category.CONFIG, "The fbmsggen.toml file is malformed or holds an invalid value."))

_add(ErrorMessage("GE3003", Severity.ERROR,
    "no input files given",
    Category.CONFIG, "Pass message headers or data files on the command line or list them under [generator] inputs."))

# General warnings
_add(ErrorMessage("GW0001", Severity.WARNING,
    "missing trailing newline", Category.GENERAL,
    "Header files should end with a newline character."))

# Encoding warnings
_add(ErrorMessage("GW1001", Severity.WARNING,
    "facility {facility} = {value} does not fit in 5 bits and is truncated to {masked}", Category.ENCODING,
    "Facilities occupy bits 16-20 of the status code; higher bits are dropped."))

_add(ErrorMessage("GW1002", Severity.WARNING,
    "message number {number} does not fit in 14 bits and is truncated to {masked}", Category.ENCODING,
    "Message numbers occupy bits 0-13 of the status code; higher bits are dropped."))

_add(ErrorMessage("GW1003", Severity.WARNING,
    "duplicate status code {code} (first defined at {prev_loc}); the later entry wins", Category.ENCODING,
    "Both entries are written to the table. Map literal consumers keep the last value for a key."))

# Input warnings
_add(ErrorMessage("GW2001", Severity.WARNING,
    "no message definitions found in '{path}'", Category.INPUT,
    "The file parsed cleanly but contributed no FB_IMPL_MSG* entries."))
