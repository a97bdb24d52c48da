"""Hand-written recursive descent recognizer for the simplified XML dialect.

Each grammar production is one method on a per-call matcher. Productions have a
single shape, so the next character always decides which production applies
and no backtracking is needed. The first production that cannot match raises a
StructuralError; nothing is recovered.
"""

import logging
import string
import time
from typing import List, Optional

from xml_to_json_parser.shared.config import DEFAULT_MAX_NESTING_DEPTH
from xml_to_json_parser.shared.errors import NestingDepthError, StructuralError

from .nodes import ParseNode, Rule, SourcePosition

NAME_START_CHARS = frozenset(string.ascii_letters)
NAME_CHARS = frozenset(string.ascii_letters + string.digits + "_-")
WHITESPACE_CHARS = frozenset(" \t\r\n")

logger = logging.getLogger(__name__)


class _ProductionMatcher:
    """Recognition state for a single call: the buffer and a cursor into it."""

    def __init__(self, source: str, max_depth: Optional[int]) -> None:
        self.source = source
        self.length = len(source)
        self.pos = 0
        self.max_depth = max_depth
        self.depth = 0

    def fail(self, rule: Rule, expected: str, offset: Optional[int] = None) -> None:
        """Raise a structural error for rule at offset (default: the cursor)."""
        if offset is None:
            offset = self.pos
        position = SourcePosition.from_offset(self.source, offset)
        raise StructuralError(
            rule.value, offset, expected, position.line, position.column
        )

    def peek(self) -> str:
        """Return the character under the cursor, or '' at end of input."""
        if self.pos < self.length:
            return self.source[self.pos]
        return ""

    def skip_whitespace(self) -> int:
        """Advance over whitespace and return how many characters were skipped."""
        start = self.pos
        while self.pos < self.length and self.source[self.pos] in WHITESPACE_CHARS:
            self.pos += 1
        return self.pos - start

    def expect(self, rule: Rule, literal: str) -> None:
        """Consume literal or fail inside rule."""
        if not self.source.startswith(literal, self.pos):
            self.fail(rule, repr(literal))
        self.pos += len(literal)

    def node(
        self, rule: Rule, start: int, children: Optional[List[ParseNode]] = None
    ) -> ParseNode:
        return ParseNode(rule, self.source, start, self.pos, children or [])

    # Productions

    def name(self) -> ParseNode:
        start = self.pos
        if self.peek() not in NAME_START_CHARS:
            self.fail(Rule.NAME, "an ASCII letter")
        self.pos += 1
        while self.pos < self.length and self.source[self.pos] in NAME_CHARS:
            self.pos += 1
        return self.node(Rule.NAME, start)

    def attribute_value(self) -> ParseNode:
        # The opening quote has already been consumed by attribute()
        start = self.pos
        end = self.source.find('"', start)
        self.pos = self.length if end == -1 else end
        return self.node(Rule.ATTRIBUTE_VALUE, start)

    def attribute(self) -> ParseNode:
        start = self.pos
        name = self.name()
        self.skip_whitespace()
        self.expect(Rule.ATTRIBUTE, "=")
        self.skip_whitespace()
        self.expect(Rule.ATTRIBUTE, '"')
        value = self.attribute_value()
        self.expect(Rule.ATTRIBUTE, '"')
        return self.node(Rule.ATTRIBUTE, start, [name, value])

    def open_tag(self) -> ParseNode:
        start = self.pos
        self.expect(Rule.OPEN_TAG, "<")
        children = [self.name()]

        while True:
            before = self.pos
            if self.skip_whitespace() and self.peek() in NAME_START_CHARS:
                children.append(self.attribute())
            else:
                self.pos = before
                break

        self.skip_whitespace()
        self.expect(Rule.OPEN_TAG, ">")
        return self.node(Rule.OPEN_TAG, start, children)

    def close_tag(self) -> ParseNode:
        start = self.pos
        self.expect(Rule.CLOSE_TAG, "<")
        self.expect(Rule.CLOSE_TAG, "/")
        self.skip_whitespace()
        name = self.name()
        self.skip_whitespace()
        self.expect(Rule.CLOSE_TAG, ">")
        return self.node(Rule.CLOSE_TAG, start, [name])

    def inner_text(self) -> ParseNode:
        start = self.pos
        end = self.source.find("<", start)
        if end == -1:
            end = self.length
        if end == start:
            self.fail(Rule.INNER_TEXT, "a character other than '<'")
        self.pos = end
        return self.node(Rule.INNER_TEXT, start)

    def element(self, depth: int = 1) -> ParseNode:
        start = self.pos
        if self.max_depth is not None and depth > self.max_depth:
            position = SourcePosition.from_offset(self.source, start)
            raise NestingDepthError(
                self.max_depth, start, position.line, position.column
            )
        self.depth = depth

        children = [self.open_tag()]
        while True:
            char = self.peek()
            if not char:
                self.fail(Rule.CLOSE_TAG, "'</'")
            if self.source.startswith("</", self.pos):
                children.append(self.close_tag())
                break
            if char == "<":
                children.append(self.element(depth + 1))
            else:
                children.append(self.inner_text())

        return self.node(Rule.ELEMENT, start, children)

    def document(self) -> ParseNode:
        start = self.pos
        self.skip_whitespace()
        element = self.element()
        self.skip_whitespace()
        if self.pos != self.length:
            self.fail(Rule.DOCUMENT, "end of input")
        return self.node(Rule.DOCUMENT, start, [element])


_PRODUCTIONS = {
    Rule.DOCUMENT: _ProductionMatcher.document,
    Rule.ELEMENT: _ProductionMatcher.element,
    Rule.OPEN_TAG: _ProductionMatcher.open_tag,
    Rule.CLOSE_TAG: _ProductionMatcher.close_tag,
    Rule.ATTRIBUTE: _ProductionMatcher.attribute,
    Rule.NAME: _ProductionMatcher.name,
    Rule.ATTRIBUTE_VALUE: _ProductionMatcher.attribute_value,
    Rule.INNER_TEXT: _ProductionMatcher.inner_text,
}


class GrammarRecognizer:
    """Partition raw text into a concrete parse tree.

    The recognizer holds only immutable settings; every call builds its own
    matcher, so one instance can be shared between threads.
    """

    def __init__(
        self,
        max_nesting_depth: Optional[int] = DEFAULT_MAX_NESTING_DEPTH,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize the recognizer.

        Args:
            max_nesting_depth: Deepest element nesting accepted, or None for
                no limit
            correlation_id: Optional correlation ID for tracking requests
        """
        self.max_nesting_depth = max_nesting_depth
        self.correlation_id = correlation_id

    def recognize(self, text: str, rule: Rule = Rule.DOCUMENT) -> ParseNode:
        """Match a production against text.

        ``Rule.DOCUMENT`` must consume the whole input. Any other production is
        anchored at offset 0 and returns the prefix it matched.

        Args:
            text: Input buffer
            rule: Production to match

        Returns:
            Root node of the concrete parse tree

        Raises:
            StructuralError: If the production cannot match
            NestingDepthError: If nesting exceeds the configured limit or the
                interpreter stack
        """
        start_time = time.time()
        matcher = _ProductionMatcher(text, self.max_nesting_depth)

        try:
            node = _PRODUCTIONS[rule](matcher)
        except RecursionError:
            # Limit disabled or set above what the interpreter stack supports
            position = SourcePosition.from_offset(text, matcher.pos)
            logger.debug(
                "Recognition exhausted the interpreter stack",
                extra={
                    "correlation_id": self.correlation_id,
                    "depth": matcher.depth,
                    "offset": matcher.pos,
                },
            )
            raise NestingDepthError(
                max(matcher.depth - 1, 1), matcher.pos, position.line, position.column
            ) from None
        except StructuralError as e:
            logger.debug(
                "Recognition failed",
                extra={
                    "correlation_id": self.correlation_id,
                    "rule": e.rule,
                    "offset": e.offset,
                },
            )
            raise

        logger.debug(
            "Recognized %s",
            rule.value,
            extra={
                "correlation_id": self.correlation_id,
                "characters": node.end,
                "processing_time_ms": (time.time() - start_time) * 1000,
            },
        )
        return node
