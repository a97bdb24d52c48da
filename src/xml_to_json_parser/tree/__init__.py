"""Tree transformation from concrete parse trees to JSON object values.

This module folds recognized elements into nested insertion-ordered mappings,
enforcing the rules the grammar cannot express: open and close tag names must
match, attributes are namespaced with a leading underscore, and child elements
take precedence over text.
"""

from .transformer import (
    ATTRIBUTE_PREFIX,
    TEXT_KEY,
    TransformResult,
    TreeTransformer,
)

__all__ = [
    "ATTRIBUTE_PREFIX",
    "TEXT_KEY",
    "TransformResult",
    "TreeTransformer",
]
