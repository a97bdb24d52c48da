"""Grammar recognition for the simplified XML dialect.

Key Components:
    GrammarRecognizer: Matches productions and builds the concrete parse tree
    ParseNode: A typed syntactic unit indexing into the input buffer
    Rule: Enumeration of the grammar's productions
    SourcePosition: Offset, line and column information for diagnostics
"""

from .nodes import ParseNode, Rule, SourcePosition
from .recognizer import GrammarRecognizer

__all__ = [
    "GrammarRecognizer",
    "ParseNode",
    "Rule",
    "SourcePosition",
]
