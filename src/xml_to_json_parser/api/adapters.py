"""Integration adapters between output values and popular libraries.

Adapters convert a parsed value to another library's representation
(ElementTree, lxml, pandas) and, where that is meaningful, back again. The
reverse mapping follows the folding conventions: ``_text`` becomes element
text, other underscore keys become attributes, remaining keys become child
elements and a bare string becomes the element's text.

Conversions never raise; failures are reported through ConversionResult.
"""

import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List, Optional, Type

from xml_to_json_parser.shared import (
    DiagnosticEntry,
    DiagnosticSeverity,
    OutputValue,
    XMLToJSONError,
    get_logger,
)
from xml_to_json_parser.tree import ATTRIBUTE_PREFIX, TEXT_KEY


class AdapterType(Enum):
    """Types of integration adapters."""

    XML_LIBRARY = auto()     # Element tree libraries (ElementTree, lxml)
    DATA_FRAME = auto()      # DataFrame libraries (pandas)


@dataclass
class AdapterMetadata:
    """Metadata about an integration adapter."""

    name: str
    version: str
    adapter_type: AdapterType
    target_library: str
    description: str
    supports_reverse: bool = True


@dataclass
class ConversionResult:
    """Result of a conversion operation."""

    success: bool
    converted_data: Any
    original_data: Any
    conversion_time_ms: float
    errors: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)


class IntegrationAdapter(ABC):
    """Abstract base class for all integration adapters."""

    def __init__(self, correlation_id: Optional[str] = None) -> None:
        """Initialize the integration adapter.

        Args:
            correlation_id: Optional correlation ID for request tracking
        """
        self.correlation_id = correlation_id
        self._logger = get_logger(__name__, correlation_id, self.__class__.__name__)

    @property
    @abstractmethod
    def metadata(self) -> AdapterMetadata:
        """Get adapter metadata."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the target library can be imported."""

    @abstractmethod
    def to_target(self, value: Dict[str, OutputValue]) -> ConversionResult:
        """Convert a singleton output mapping to the target representation."""

    @abstractmethod
    def from_target(self, target_data: Any) -> ConversionResult:
        """Convert target data back to a singleton output mapping."""

    def _create_error_result(
        self,
        error_message: str,
        original_data: Any,
        start_time: float
    ) -> ConversionResult:
        """Create a ConversionResult for error conditions."""
        self._logger.warning(error_message, extra={"adapter": self.metadata.name})
        return ConversionResult(
            success=False,
            converted_data=None,
            original_data=original_data,
            conversion_time_ms=(time.time() - start_time) * 1000,
            errors=[error_message],
            diagnostics=[
                DiagnosticEntry(
                    severity=DiagnosticSeverity.WARNING,
                    message=error_message,
                    component=self.__class__.__name__,
                    correlation_id=self.correlation_id
                )
            ]
        )


class AdapterRegistry:
    """Registry for managing integration adapters."""

    def __init__(self) -> None:
        """Initialize the adapter registry."""
        self._adapters: Dict[str, Type[IntegrationAdapter]] = {}
        self._lock = threading.RLock()

    def register(self, adapter_class: Type[IntegrationAdapter]) -> None:
        """Register an adapter class under its metadata name."""
        with self._lock:
            self._adapters[adapter_class().metadata.name] = adapter_class

    def get_adapter(
        self,
        adapter_name: str,
        correlation_id: Optional[str] = None
    ) -> Optional[IntegrationAdapter]:
        """Get an adapter instance by name.

        Returns:
            Adapter instance if registered and its library is available,
            None otherwise
        """
        with self._lock:
            adapter_class = self._adapters.get(adapter_name)
        if adapter_class is None:
            return None

        instance = adapter_class(correlation_id)
        return instance if instance.is_available() else None

    def list_available_adapters(self) -> List[AdapterMetadata]:
        """List metadata for adapters whose libraries are available."""
        with self._lock:
            adapter_classes = list(self._adapters.values())

        available = []
        for adapter_class in adapter_classes:
            instance = adapter_class()
            if instance.is_available():
                available.append(instance.metadata)
        return available


# Global adapter registry instance
_adapter_registry = AdapterRegistry()


def register_adapter(adapter_class: Type[IntegrationAdapter]) -> None:
    """Register an integration adapter globally."""
    _adapter_registry.register(adapter_class)


def get_adapter(
    adapter_name: str,
    correlation_id: Optional[str] = None
) -> Optional[IntegrationAdapter]:
    """Get a registered adapter instance, or None if unknown or unavailable."""
    return _adapter_registry.get_adapter(adapter_name, correlation_id)


def list_available_adapters() -> List[AdapterMetadata]:
    """List all available integration adapters."""
    return _adapter_registry.list_available_adapters()


def _build_element(etree: Any, name: str, content: OutputValue) -> Any:
    """Build an element with an ElementTree-compatible module."""
    element = etree.Element(name)

    if isinstance(content, str):
        element.text = content
        return element

    for key, value in content.items():
        if key == TEXT_KEY:
            element.text = value
        elif key.startswith(ATTRIBUTE_PREFIX):
            element.set(key[len(ATTRIBUTE_PREFIX):], value)
        else:
            element.append(_build_element(etree, key, value))

    return element


def _write_markup(element: Any, parts: List[str]) -> None:
    """Write an element as markup with explicit close tags."""
    attributes = "".join(f' {key}="{value}"' for key, value in element.attrib.items())
    parts.append(f"<{element.tag}{attributes}>")
    if element.text:
        parts.append(element.text)
    for child in element:
        # Comments and processing instructions have non-string tags
        if isinstance(child.tag, str):
            _write_markup(child, parts)
        if child.tail:
            parts.append(child.tail)
    parts.append(f"</{element.tag}>")


def element_to_markup(element: Any) -> str:
    """Serialize an ElementTree-compatible element in the simplified dialect.

    The dialect has no self-closing tags and no entity escaping, so text and
    attribute values are written verbatim.
    """
    parts: List[str] = []
    _write_markup(element, parts)
    return "".join(parts)


class _ElementAdapterBase(IntegrationAdapter):
    """Shared conversion logic for ElementTree-compatible libraries."""

    def _etree(self) -> Any:
        raise NotImplementedError

    def to_target(self, value: Dict[str, OutputValue]) -> ConversionResult:
        """Convert a singleton output mapping to an element."""
        start_time = time.time()

        if not isinstance(value, dict) or len(value) != 1:
            return self._create_error_result(
                "Value must be a singleton mapping", value, start_time
            )

        try:
            name, content = next(iter(value.items()))
            element = _build_element(self._etree(), name, content)
        except (TypeError, ValueError, AttributeError) as e:
            return self._create_error_result(
                f"Failed to convert to {self.metadata.target_library}: {e}",
                value,
                start_time
            )

        return ConversionResult(
            success=True,
            converted_data=element,
            original_data=value,
            conversion_time_ms=(time.time() - start_time) * 1000,
            metadata={"root_tag": name},
        )

    def from_target(self, target_data: Any) -> ConversionResult:
        """Convert an element back to a singleton output mapping."""
        from xml_to_json_parser.api.parser import parse_string

        start_time = time.time()

        if not hasattr(target_data, "tag") or not isinstance(target_data.tag, str):
            return self._create_error_result(
                f"Target data is not a valid {self.metadata.target_library} element",
                target_data,
                start_time
            )

        markup = element_to_markup(target_data)
        try:
            value = parse_string(markup, correlation_id=self.correlation_id)
        except XMLToJSONError as e:
            return self._create_error_result(
                f"Failed to convert from {self.metadata.target_library}: {e}",
                target_data,
                start_time
            )

        return ConversionResult(
            success=True,
            converted_data=value,
            original_data=target_data,
            conversion_time_ms=(time.time() - start_time) * 1000,
            metadata={"original_tag": target_data.tag, "markup_length": len(markup)},
        )


class ElementTreeAdapter(_ElementAdapterBase):
    """Adapter for bidirectional conversion with xml.etree.ElementTree."""

    @property
    def metadata(self) -> AdapterMetadata:
        """Get adapter metadata."""
        return AdapterMetadata(
            name="etree",
            version="1.0.0",
            adapter_type=AdapterType.XML_LIBRARY,
            target_library="xml.etree.ElementTree",
            description="Bidirectional conversion between output values and ElementTree"
        )

    def is_available(self) -> bool:
        """ElementTree ships with Python."""
        return True

    def _etree(self) -> Any:
        import xml.etree.ElementTree as ET
        return ET


class LxmlAdapter(_ElementAdapterBase):
    """Adapter for bidirectional conversion with lxml.etree."""

    @property
    def metadata(self) -> AdapterMetadata:
        """Get adapter metadata."""
        return AdapterMetadata(
            name="lxml",
            version="1.0.0",
            adapter_type=AdapterType.XML_LIBRARY,
            target_library="lxml",
            description="Bidirectional conversion between output values and lxml.etree"
        )

    def is_available(self) -> bool:
        """Check if lxml is available."""
        try:
            import lxml.etree  # noqa: F401
            return True
        except ImportError:
            return False

    def _etree(self) -> Any:
        import lxml.etree
        return lxml.etree


class PandasAdapter(IntegrationAdapter):
    """Adapter flattening output values into a one-row pandas DataFrame."""

    @property
    def metadata(self) -> AdapterMetadata:
        """Get adapter metadata."""
        return AdapterMetadata(
            name="pandas",
            version="1.0.0",
            adapter_type=AdapterType.DATA_FRAME,
            target_library="pandas",
            description="Flatten output values into pandas DataFrame columns",
            supports_reverse=False,
        )

    def is_available(self) -> bool:
        """Check if pandas is available."""
        try:
            import pandas  # noqa: F401
            return True
        except ImportError:
            return False

    def to_target(
        self, value: Dict[str, OutputValue], sep: str = "."
    ) -> ConversionResult:
        """Flatten a value into columns named by key path, e.g. ``root.child._id``."""
        start_time = time.time()

        if not self.is_available():
            return self._create_error_result(
                "pandas is not installed", value, start_time
            )

        import pandas as pd

        if not isinstance(value, dict):
            return self._create_error_result(
                "Value must be a mapping", value, start_time
            )

        df = pd.json_normalize(value, sep=sep)

        return ConversionResult(
            success=True,
            converted_data=df,
            original_data=value,
            conversion_time_ms=(time.time() - start_time) * 1000,
            metadata={
                "dataframe_shape": df.shape,
                "columns": list(df.columns),
            }
        )

    def from_target(self, target_data: Any) -> ConversionResult:
        """Flattened frames lose nesting boundaries, so the reverse is unsupported."""
        return self._create_error_result(
            "Conversion from pandas DataFrame is not supported",
            target_data,
            time.time()
        )


register_adapter(ElementTreeAdapter)
register_adapter(LxmlAdapter)
register_adapter(PandasAdapter)
