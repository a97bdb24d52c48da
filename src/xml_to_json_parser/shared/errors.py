"""Exception hierarchy for XML to JSON conversion.

Every failure is raised at the point where it is detected and propagates to the
caller unchanged. There is no partial-result mode: a malformed fragment anywhere
in the document invalidates the whole parse.
"""

from typing import Optional


class XMLToJSONError(Exception):
    """Base exception for all conversion failures."""


class EmptyInputError(XMLToJSONError):
    """Raised when the supplied text is empty or contains only whitespace."""

    def __init__(self, message: str = "XML is empty") -> None:
        super().__init__(message)


class InputSizeError(XMLToJSONError):
    """Raised when the input exceeds the configured size limit."""

    def __init__(self, size_bytes: int, limit_bytes: int) -> None:
        super().__init__(
            f"Input of {size_bytes} bytes exceeds the limit of {limit_bytes} bytes"
        )
        self.size_bytes = size_bytes
        self.limit_bytes = limit_bytes


class InputDecodingError(XMLToJSONError):
    """Raised when byte input cannot be decoded as text."""


class StructuralError(XMLToJSONError):
    """Raised when the text does not conform to the grammar.

    Attributes:
        rule: Name of the production that failed to match
        offset: Zero-based character offset of the failure
        expected: Human-readable description of what was expected
        line: One-based line number of the failure
        column: One-based column number of the failure
    """

    def __init__(
        self,
        rule: str,
        offset: int,
        expected: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ) -> None:
        self.rule = rule
        self.offset = offset
        self.expected = expected
        self.line = line
        self.column = column

        location = f"offset {offset}"
        if line is not None and column is not None:
            location = f"line {line}, column {column} (offset {offset})"
        super().__init__(f"Expected {expected} in {rule} at {location}")


class NestingDepthError(StructuralError):
    """Raised when elements nest deeper than the configured limit."""

    def __init__(
        self,
        max_depth: int,
        offset: int,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ) -> None:
        super().__init__(
            "element",
            offset,
            f"nesting depth of at most {max_depth}",
            line,
            column,
        )
        self.max_depth = max_depth


class TagMismatchError(XMLToJSONError):
    """Raised when an element's open-tag and close-tag names differ."""

    def __init__(self, open_name: str, close_name: str, offset: int = 0) -> None:
        super().__init__(
            f"There are different open and close tags names: "
            f"<{open_name}> closed by </{close_name}> at offset {offset}"
        )
        self.open_name = open_name
        self.close_name = close_name
        self.offset = offset
