"""Turns the lark parse tree of a message header into a HeaderUnit."""
from __future__ import annotations

import re
from typing import List

from lark import Tree, Token

from fbmsggen.internals.report import span_of
from fbmsggen.semantics.facilities import parse_int
from fbmsggen.semantics.records import (
    FacilityDefine, HeaderUnit, Include, MessageDefinition,
    KIND_MSG, KIND_SYMBOL, KIND_NO_SYMBOL,
)
from fbmsggen.semantics.string_processing import parse_string_tokens

_INCLUDE_RE = re.compile(r'#\s*include\s*"([^"]*)"')
_DEFINE_RE = re.compile(r"#\s*define\s+(\w+)\s+(\S+)")


def _children(t: Tree, data: str) -> List[Tree]:
    return [c for c in t.children if isinstance(c, Tree) and c.data == data]


def _name(t: Tree) -> str:
    return next(str(c) for c in t.children if isinstance(c, Token) and c.type == "NAME")


class ASTBuilder:
    def build(self, tree: Tree) -> HeaderUnit:
        unit = HeaderUnit()
        for node in tree.children:
            handler = getattr(self, f"_build_{node.data}")
            unit.items.append(handler(node))
        return unit

    # ------------------------------------------------------------------
    # Message macros
    # ------------------------------------------------------------------

    def _facility(self, t: Tree):
        tok = _children(t, "facility")[0].children[0]
        if tok.type == "NUMBER":
            return parse_int(str(tok))
        return str(tok)

    def _numbers(self, t: Tree) -> List[int]:
        return [parse_int(str(n.children[0])) for n in _children(t, "number")]

    def _strings(self, t: Tree) -> List[str]:
        return [parse_string_tokens(s.children, span_of(s)) for s in _children(t, "string")]

    def _build_msg(self, t: Tree) -> MessageDefinition:
        number, sql_code = self._numbers(t)
        sql_class, sql_subclass, text = self._strings(t)
        return MessageDefinition(
            facility=self._facility(t),
            number=number,
            text=text,
            symbol=_name(t),
            kind=KIND_MSG,
            sql_code=sql_code,
            sql_class=sql_class,
            sql_subclass=sql_subclass,
            loc=span_of(t),
        )

    def _build_msg_symbol(self, t: Tree) -> MessageDefinition:
        (number,) = self._numbers(t)
        (text,) = self._strings(t)
        return MessageDefinition(
            facility=self._facility(t),
            number=number,
            text=text,
            symbol=_name(t),
            kind=KIND_SYMBOL,
            loc=span_of(t),
        )

    def _build_msg_no_symbol(self, t: Tree) -> MessageDefinition:
        (number,) = self._numbers(t)
        (text,) = self._strings(t)
        return MessageDefinition(
            facility=self._facility(t),
            number=number,
            text=text,
            kind=KIND_NO_SYMBOL,
            loc=span_of(t),
        )

    # ------------------------------------------------------------------
    # Preprocessor lines
    # ------------------------------------------------------------------

    def _build_include(self, t: Tree) -> Include:
        tok = t.children[0]
        return Include(_INCLUDE_RE.match(str(tok)).group(1), loc=span_of(tok))

    def _build_facility_define(self, t: Tree) -> FacilityDefine:
        tok = t.children[0]
        name, value = _DEFINE_RE.match(str(tok)).groups()
        return FacilityDefine(name, parse_int(value), loc=span_of(tok))
