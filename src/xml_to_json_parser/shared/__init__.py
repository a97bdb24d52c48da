"""Shared utilities for XML to JSON conversion.

This module provides configuration objects, the error hierarchy, result types,
and logging helpers used across the grammar, tree and API layers.
"""

from .config import (
    ConfigError,
    ConfigValidationError,
    GlobalConfig,
    GrammarConfig,
    OutputConfig,
    ParserConfig,
    TransformConfig,
)
from .errors import (
    EmptyInputError,
    InputDecodingError,
    InputSizeError,
    NestingDepthError,
    StructuralError,
    TagMismatchError,
    XMLToJSONError,
)
from .logging import (
    CorrelationLogger,
    configure_logging,
    get_logger,
)
from .result import (
    DiagnosticEntry,
    DiagnosticSeverity,
    OutputValue,
    ParseMetrics,
    ParseResult,
)

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "GlobalConfig",
    "GrammarConfig",
    "OutputConfig",
    "ParserConfig",
    "TransformConfig",
    "EmptyInputError",
    "InputDecodingError",
    "InputSizeError",
    "NestingDepthError",
    "StructuralError",
    "TagMismatchError",
    "XMLToJSONError",
    "CorrelationLogger",
    "configure_logging",
    "get_logger",
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "OutputValue",
    "ParseMetrics",
    "ParseResult",
]
