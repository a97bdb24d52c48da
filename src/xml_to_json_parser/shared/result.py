"""Result objects and diagnostic types for XML to JSON conversion.

This module defines the result object returned by the configured parser, along
with diagnostics describing the documented simplifications applied while
folding (dropped text, overwritten keys) and per-call metrics.
"""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List, Optional, Union

# Output value model: a string, or an insertion-ordered mapping of values
OutputValue = Union[str, Dict[str, Any]]


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    WARNING = auto()    # Content silently dropped or overwritten


@dataclass
class DiagnosticEntry:
    """Single diagnostic entry with context information."""

    severity: DiagnosticSeverity
    message: str
    component: str
    position: Optional[Dict[str, int]] = None
    details: Optional[Dict[str, Any]] = None
    timestamp: float = field(default_factory=time.time)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate diagnostic entry."""
        if not self.message:
            raise ValueError("Diagnostic message cannot be empty")
        if not self.component:
            raise ValueError("Diagnostic component cannot be empty")


@dataclass
class ParseMetrics:
    """Counters and timing for a single parse call."""

    processing_time_ms: float = 0.0
    characters_processed: int = 0
    elements_transformed: int = 0
    attributes_collected: int = 0
    text_fragments_kept: int = 0
    text_fragments_discarded: int = 0


@dataclass
class ParseResult:
    """Converted value together with diagnostics and metrics."""

    value: Dict[str, OutputValue]
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    metrics: ParseMetrics = field(default_factory=ParseMetrics)
    correlation_id: Optional[str] = None

    @property
    def root_name(self) -> str:
        """Name of the document's top-level element."""
        return next(iter(self.value))

    @property
    def warnings(self) -> List[DiagnosticEntry]:
        """Diagnostics reporting dropped or overwritten content."""
        return [
            diagnostic for diagnostic in self.diagnostics
            if diagnostic.severity == DiagnosticSeverity.WARNING
        ]

    @property
    def has_warnings(self) -> bool:
        """Check if any content was dropped or overwritten."""
        return len(self.warnings) > 0
