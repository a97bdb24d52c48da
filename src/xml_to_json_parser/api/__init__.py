"""Public API for XML to JSON conversion.

Level 1 functions (parse, parse_string, parse_bytes, parse_file) return the
converted value; XMLToJSONParser adds configuration, diagnostics and metrics.
Integration adapters convert values to and from other libraries.
"""

from .adapters import (
    AdapterMetadata,
    AdapterType,
    ConversionResult,
    ElementTreeAdapter,
    IntegrationAdapter,
    LxmlAdapter,
    PandasAdapter,
    get_adapter,
    list_available_adapters,
    register_adapter,
)
from .parser import (
    XMLToJSONParser,
    parse,
    parse_bytes,
    parse_file,
    parse_string,
    to_json,
)

__all__ = [
    "AdapterMetadata",
    "AdapterType",
    "ConversionResult",
    "ElementTreeAdapter",
    "IntegrationAdapter",
    "LxmlAdapter",
    "PandasAdapter",
    "get_adapter",
    "list_available_adapters",
    "register_adapter",
    "XMLToJSONParser",
    "parse",
    "parse_bytes",
    "parse_file",
    "parse_string",
    "to_json",
]
