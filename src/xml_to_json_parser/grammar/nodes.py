"""Concrete parse tree produced by the grammar recognizer.

Nodes index into the original input buffer instead of copying it; the tree is
built once per parse call and discarded after transformation.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional


class Rule(Enum):
    """Grammar productions; each value is the production's name."""

    DOCUMENT = "document"                # Exactly one element, optional whitespace
    ELEMENT = "element"                  # open_tag (element | inner_text)* close_tag
    OPEN_TAG = "open_tag"                # < name (ws attribute)* ws? >
    CLOSE_TAG = "close_tag"              # < / ws? name ws? >
    ATTRIBUTE = "attribute"              # name ws? = ws? " attribute_value "
    NAME = "name"                        # [A-Za-z][A-Za-z0-9_-]*
    ATTRIBUTE_VALUE = "attribute_value"  # Characters up to the next quote
    INNER_TEXT = "inner_text"            # One or more characters other than <


@dataclass(frozen=True)
class SourcePosition:
    """Position information within the input buffer."""

    offset: int
    line: int
    column: int

    def __post_init__(self) -> None:
        """Validate position values."""
        if self.line < 1:
            raise ValueError("Line number must be >= 1")
        if self.column < 1:
            raise ValueError("Column number must be >= 1")
        if self.offset < 0:
            raise ValueError("Offset must be >= 0")

    @classmethod
    def from_offset(cls, source: str, offset: int) -> "SourcePosition":
        """Compute line and column for an offset into source."""
        line = source.count("\n", 0, offset) + 1
        line_start = source.rfind("\n", 0, offset) + 1
        return cls(offset=offset, line=line, column=offset - line_start + 1)


@dataclass
class ParseNode:
    """A typed syntactic unit spanning ``source[start:end]``."""

    rule: Rule
    source: str = field(repr=False)
    start: int
    end: int
    children: List["ParseNode"] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate span bounds."""
        if not (0 <= self.start <= self.end <= len(self.source)):
            raise ValueError(
                f"Invalid span {self.start}:{self.end} for input of "
                f"length {len(self.source)}"
            )

    @property
    def text(self) -> str:
        """The slice of input matched by this node."""
        return self.source[self.start:self.end]

    @property
    def position(self) -> SourcePosition:
        """Line and column where this node starts."""
        return SourcePosition.from_offset(self.source, self.start)

    def children_of(self, rule: Rule) -> Iterator["ParseNode"]:
        """Iterate over direct children matching a production."""
        return (child for child in self.children if child.rule is rule)

    def first(self, rule: Rule) -> Optional["ParseNode"]:
        """Return the first direct child matching a production, if any."""
        return next(self.children_of(rule), None)
