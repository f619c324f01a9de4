"""Lark parser setup and HeaderUnit construction."""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from lark import Lark, UnexpectedCharacters, UnexpectedEOF, UnexpectedInput, UnexpectedToken

from fbmsggen.semantics.ast_builder import ASTBuilder

GRAMMAR_PATH = Path(__file__).parent.parent / "grammar.lark"

# Argument counts of the three macro forms, for error hints
_ARITY_HINT = ("FB_IMPL_MSG takes 7 arguments, FB_IMPL_MSG_SYMBOL 4 "
               "and FB_IMPL_MSG_NO_SYMBOL 3")


@lru_cache(maxsize=1)
def get_parser() -> Lark:
    return Lark.open(
        str(GRAMMAR_PATH),
        parser="lalr",
        lexer="contextual",
        propagate_positions=True,
        maybe_placeholders=False,
    )


def improve_parse_error(e: UnexpectedInput) -> str:
    """Describe a parse error in one line, with a hint for common header mistakes."""
    if isinstance(e, UnexpectedEOF):
        return "unexpected end of file (unbalanced parentheses?)"

    if isinstance(e, UnexpectedCharacters):
        return f"unexpected character {e.char!r}"

    if isinstance(e, UnexpectedToken):
        expected = ", ".join(sorted(e.expected))
        text = f"unexpected {e.token.type} {str(e.token)!r}, expected one of: {expected}"
        if set(e.expected) == {"STRING"}:
            text += " (hint: message texts must be double-quoted string literals)"
        elif e.token.type in ("RPAR", "COMMA", "STRING", "NAME", "NUMBER"):
            text += f" (hint: {_ARITY_HINT})"
        return text

    return str(e)


def parse_header(src: str, dump_parse: bool = False):
    """Parse a message header.

    Returns:
        Tuple of (HeaderUnit, parse_tree).
    """
    tree = get_parser().parse(src)
    if dump_parse:
        print(tree.pretty())

    return ASTBuilder().build(tree), tree
