"""XML to JSON Parser.

Converts documents in a simplified XML dialect into the JSON object model:
attributes become ``_``-prefixed keys, child elements become nested mappings,
and elements holding only text collapse to strings.

Progressive API Disclosure:
- Level 1: Simple functions - parse(), parse_string(), parse_file()
- Level 2: Configured parser - XMLToJSONParser class
"""

__version__ = "0.1.0"
__author__ = "XML to JSON Parser Team"

# Progressive API disclosure - Level 1: Simple functions
# Progressive API disclosure - Level 2: Advanced configuration
from .api import XMLToJSONParser, parse, parse_file, parse_string, to_json

# Configuration and result objects
from .shared.config import ParserConfig
from .shared.errors import (
    EmptyInputError,
    StructuralError,
    TagMismatchError,
    XMLToJSONError,
)
from .shared.result import ParseResult

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple parsing functions
    "parse",
    "parse_string",
    "parse_file",
    "to_json",

    # Level 2: Configured parser
    "XMLToJSONParser",

    # Configuration and results
    "ParserConfig",
    "ParseResult",

    # Errors
    "XMLToJSONError",
    "EmptyInputError",
    "StructuralError",
    "TagMismatchError",
]
