"""Shared parse exception handling for the loader and CLI."""
from __future__ import annotations

from lark import UnexpectedInput

from fbmsggen.internals import errors as er
from fbmsggen.internals.report import Span


def handle_parse_exception(exc: Exception, reporter, source_path=None) -> bool:
    """Handle a parse exception by emitting diagnostics through the reporter.

    Args:
        exc: The exception to handle.
        reporter: Reporter for error/warning collection.
        source_path: Optional path the diagnostic is attributed to.

    Returns:
        True if the exception was handled, False otherwise.
    """
    from fbmsggen.internals.parser import improve_parse_error

    filename = str(source_path) if source_path else None

    if isinstance(exc, er.CatalogError):
        exc.report(reporter, filename=filename)
        return True

    if isinstance(exc, UnexpectedInput):
        line = getattr(exc, "line", -1)
        col = getattr(exc, "column", -1)
        span = Span(line, col, line, col) if line and line > 0 else None
        er.emit(reporter, er.ERR.GE1000, span, filename=filename,
                detail=improve_parse_error(exc))
        return True

    return False
