"""Configuration classes for XML to JSON conversion.

This module provides immutable configuration objects for the recognition,
transformation and output stages, composed into a single ParserConfig.
"""

import json
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

DEFAULT_MAX_NESTING_DEPTH = 256
VALID_LOGGING_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
COMPONENT_FIELDS = ["grammar", "transform", "output", "global_"]


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class GrammarConfig:
    """Configuration for the grammar recognizer."""

    # None disables the guard; deep input may then exhaust the interpreter stack
    max_nesting_depth: Optional[int] = DEFAULT_MAX_NESTING_DEPTH

    def __post_init__(self) -> None:
        """Validate grammar configuration."""
        if self.max_nesting_depth is not None and self.max_nesting_depth <= 0:
            raise ConfigValidationError(
                "max_nesting_depth must be > 0 or None",
                field_name="max_nesting_depth",
            )


@dataclass(frozen=True)
class TransformConfig:
    """Configuration for the tree transformer."""

    report_dropped_text: bool = True
    report_overwritten_keys: bool = True


@dataclass(frozen=True)
class OutputConfig:
    """Configuration for JSON serialization of output values."""

    indent: Optional[int] = 2
    ensure_ascii: bool = False

    def __post_init__(self) -> None:
        """Validate output configuration."""
        if self.indent is not None and self.indent < 0:
            raise ConfigValidationError(
                "indent must be >= 0 or None", field_name="indent"
            )


@dataclass(frozen=True)
class GlobalConfig:
    """Settings that apply across all components."""

    logging_level: str = "WARNING"
    enable_correlation_tracking: bool = True
    max_input_size_bytes: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate global configuration."""
        if self.logging_level not in VALID_LOGGING_LEVELS:
            raise ConfigValidationError(
                f"logging_level must be one of {VALID_LOGGING_LEVELS}",
                field_name="logging_level",
            )
        if self.max_input_size_bytes is not None and self.max_input_size_bytes <= 0:
            raise ConfigValidationError(
                "max_input_size_bytes must be > 0 or None",
                field_name="max_input_size_bytes",
            )


@dataclass(frozen=True)
class ParserConfig:
    """Complete configuration for the XML to JSON parser.

    Frozen dataclasses make a configuration safe to share between threads and
    between parser instances.
    """

    grammar: GrammarConfig = field(default_factory=GrammarConfig)
    transform: TransformConfig = field(default_factory=TransformConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    global_: GlobalConfig = field(default_factory=GlobalConfig)

    # Metadata
    name: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate component types."""
        expected = {
            "grammar": GrammarConfig,
            "transform": TransformConfig,
            "output": OutputConfig,
            "global_": GlobalConfig,
        }
        for field_name, component_class in expected.items():
            if not isinstance(getattr(self, field_name), component_class):
                raise ConfigValidationError(
                    f"{field_name} must be a {component_class.__name__}",
                    field_name=field_name,
                )

    def override(self, **kwargs: Any) -> "ParserConfig":
        """Create a new configuration with specific overrides.

        Args:
            **kwargs: Fields to override, using ``component__field`` notation
                for component settings

        Returns:
            New ParserConfig instance with overrides applied

        Example:
            >>> config = ParserConfig().override(grammar__max_nesting_depth=32)
            >>> config.grammar.max_nesting_depth
            32
        """
        nested_overrides: Dict[str, Any] = {}
        for key, value in kwargs.items():
            # Prefix match, since "global___x" must split as ("global_", "x")
            component = next(
                (name for name in COMPONENT_FIELDS if key.startswith(name + "__")),
                None
            )
            if component is not None:
                field_name = key[len(component) + 2:]
                nested_overrides.setdefault(component, {})[field_name] = value
            elif "__" in key:
                raise ConfigValidationError(
                    f"Unknown configuration component in {key}",
                    field_name=key,
                    suggestions=COMPONENT_FIELDS,
                )
            else:
                nested_overrides[key] = value

        new_fields: Dict[str, Any] = {}
        for key, value in nested_overrides.items():
            if key in COMPONENT_FIELDS and isinstance(value, dict):
                try:
                    new_fields[key] = replace(getattr(self, key), **value)
                except TypeError as e:
                    raise ConfigValidationError(str(e), field_name=key) from e
            else:
                new_fields[key] = value

        try:
            return replace(self, **new_fields)
        except TypeError as e:
            raise ConfigValidationError(str(e)) from e

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        result: Dict[str, Any] = {}
        for field_name in self.__dataclass_fields__:
            value = getattr(self, field_name)
            if hasattr(value, "__dataclass_fields__"):
                value = {
                    name: getattr(value, name) for name in value.__dataclass_fields__
                }
            result[field_name] = value
        return result

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParserConfig":
        """Create configuration from dictionary.

        Unknown keys are rejected so that typos in configuration files surface
        instead of being ignored.
        """
        component_classes = {
            "grammar": GrammarConfig,
            "transform": TransformConfig,
            "output": OutputConfig,
            "global_": GlobalConfig,
        }
        field_values: Dict[str, Any] = {}

        for key, value in data.items():
            if key not in cls.__dataclass_fields__:
                raise ConfigValidationError(
                    f"Unknown configuration field: {key}",
                    field_name=key,
                    suggestions=list(cls.__dataclass_fields__),
                )
            if key in component_classes:
                if not isinstance(value, dict):
                    raise ConfigValidationError(
                        f"{key} must be an object", field_name=key
                    )
                try:
                    field_values[key] = component_classes[key](**value)
                except TypeError as e:
                    raise ConfigValidationError(str(e), field_name=key) from e
            else:
                field_values[key] = value

        return cls(**field_values)

    @classmethod
    def from_json(cls, json_str: str) -> "ParserConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration JSON must be an object")
        return cls.from_dict(data)

    @classmethod
    def from_file(cls, config_path: Union[str, Path]) -> "ParserConfig":
        """Load configuration from a JSON file."""
        path = Path(config_path)
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Could not read config file {path}: {e}") from e
        return cls.from_json(content)

    # Preset factory methods
    @classmethod
    def default(cls) -> "ParserConfig":
        """Create the default configuration."""
        return cls(name="default")

    @classmethod
    def untrusted_input(cls) -> "ParserConfig":
        """Create configuration preset with tight limits for untrusted documents."""
        return cls(
            grammar=GrammarConfig(max_nesting_depth=64),
            global_=GlobalConfig(max_input_size_bytes=1024 * 1024),
            name="untrusted_input",
            description="Bounded nesting depth and input size for untrusted documents",
        )

    @classmethod
    def diagnostic(cls) -> "ParserConfig":
        """Create configuration preset with verbose logging and all reports enabled."""
        return cls(
            transform=TransformConfig(
                report_dropped_text=True,
                report_overwritten_keys=True
            ),
            global_=GlobalConfig(logging_level="DEBUG"),
            name="diagnostic",
            description="Debug logging with reports for dropped and overwritten content",
        )
