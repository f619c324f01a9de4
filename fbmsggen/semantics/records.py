"""Message definitions as read from the inputs and the records written out."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Union

from fbmsggen.internals.report import Span


# Definition kinds. The three macro names double as the values accepted by
# the [generator] macros setting.
KIND_MSG = "FB_IMPL_MSG"
KIND_SYMBOL = "FB_IMPL_MSG_SYMBOL"
KIND_NO_SYMBOL = "FB_IMPL_MSG_NO_SYMBOL"
KIND_DATA = "data"

MACRO_KINDS = (KIND_MSG, KIND_SYMBOL, KIND_NO_SYMBOL)


@dataclass(frozen=True)
class MessageDefinition:
    """One message as defined upstream, before its status code is packed.

    ``facility`` is kept as written (a name such as ``JRD`` or a number) and
    is resolved against the facility table when records are built.
    """
    facility: Union[str, int]
    number: int
    text: str
    symbol: Optional[str] = None
    kind: str = KIND_MSG
    sql_code: Optional[int] = None
    sql_class: Optional[str] = None
    sql_subclass: Optional[str] = None
    loc: Optional[Span] = field(default=None, compare=False)
    filename: Optional[str] = field(default=None, compare=False)


@dataclass(frozen=True)
class MessageRecord:
    """One entry of the generated table."""
    code: int
    text: str


@dataclass
class Include:
    path: str
    loc: Optional[Span] = None


@dataclass
class FacilityDefine:
    name: str
    value: int
    loc: Optional[Span] = None


@dataclass
class HeaderUnit:
    """Everything recognised in one header, in source order."""
    items: List[Union[MessageDefinition, Include, FacilityDefine]] = field(default_factory=list)

    @property
    def messages(self) -> List[MessageDefinition]:
        return [i for i in self.items if isinstance(i, MessageDefinition)]
