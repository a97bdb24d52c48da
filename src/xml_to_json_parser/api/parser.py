"""Core parser API with progressive disclosure for XML to JSON conversion.

Level 1 is a set of module-level functions returning the converted value
directly. Level 2 is XMLToJSONParser, a configured and reusable parser whose
results also carry diagnostics and metrics. Every failure raises an
XMLToJSONError subclass; there is no partial result.
"""

import json
import time
from pathlib import Path
from typing import Any, BinaryIO, Dict, Optional, TextIO, Union

from xml_to_json_parser.grammar import GrammarRecognizer, Rule
from xml_to_json_parser.grammar.recognizer import WHITESPACE_CHARS
from xml_to_json_parser.shared import (
    EmptyInputError,
    InputDecodingError,
    InputSizeError,
    OutputValue,
    ParserConfig,
    ParseResult,
    get_logger,
)
from xml_to_json_parser.tree import TreeTransformer

# Type definitions for input data
InputType = Union[str, bytes, BinaryIO, TextIO, Path]

# Constants for API operations
PREVIEW_LENGTH = 100  # Max length for content preview in logs
MS_PER_SECOND = 1000
DEFAULT_ENCODING = "utf-8"


class XMLToJSONParser:
    """Configured XML to JSON parser.

    The parser holds only an immutable configuration, so a single instance can
    serve concurrent calls from several threads.

    Examples:
        >>> parser = XMLToJSONParser()
        >>> result = parser.parse('<p id="1">hello</p>')
        >>> result.value
        {'p': {'_id': '1', '_text': 'hello'}}
        >>> result.metrics.elements_transformed
        1
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize the parser.

        Args:
            config: Parser configuration (defaults to ParserConfig())
            correlation_id: Optional correlation ID for request tracking
        """
        self.config = config or ParserConfig()
        if not self.config.global_.enable_correlation_tracking:
            correlation_id = None
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "xml_to_json_parser")
        self.recognizer = GrammarRecognizer(
            max_nesting_depth=self.config.grammar.max_nesting_depth,
            correlation_id=correlation_id,
        )
        self.transformer = TreeTransformer(correlation_id, self.config.transform)

    def parse(self, text: str) -> ParseResult:
        """Convert a document to its JSON object value with diagnostics.

        Args:
            text: Complete document text

        Returns:
            ParseResult with the singleton mapping, diagnostics and metrics

        Raises:
            EmptyInputError: If text is empty or only whitespace
            InputSizeError: If text exceeds the configured size limit
            StructuralError: If text does not conform to the grammar
            TagMismatchError: If an element's open and close tag names differ
        """
        start_time = time.time()

        self.logger.info(
            "Starting string parse operation",
            extra={
                "content_length": len(text),
                "preview": (
                    text[:PREVIEW_LENGTH] + "..."
                    if len(text) > PREVIEW_LENGTH else text
                )
            }
        )

        self._check_input(text)

        document = self.recognizer.recognize(text, Rule.DOCUMENT)
        transformed = self.transformer.transform(document)

        metrics = transformed.metrics
        metrics.processing_time_ms = (time.time() - start_time) * MS_PER_SECOND

        self.logger.info(
            "Parse operation completed",
            extra={
                "processing_time_ms": metrics.processing_time_ms,
                "elements": metrics.elements_transformed,
                "warnings": len(transformed.diagnostics),
            }
        )

        return ParseResult(
            value=transformed.value,
            diagnostics=transformed.diagnostics,
            metrics=metrics,
            correlation_id=self.correlation_id,
        )

    def parse_value(self, text: str) -> Dict[str, OutputValue]:
        """Convert a document and return only the value."""
        return self.parse(text).value

    def to_json(self, value: OutputValue) -> str:
        """Serialize a value using this parser's output settings."""
        return to_json(
            value,
            indent=self.config.output.indent,
            ensure_ascii=self.config.output.ensure_ascii,
        )

    def _check_input(self, text: str) -> None:
        # Same whitespace set the grammar skips, so other blanks stay structural
        if all(char in WHITESPACE_CHARS for char in text):
            raise EmptyInputError()

        limit = self.config.global_.max_input_size_bytes
        if limit is not None:
            size = len(text.encode(DEFAULT_ENCODING, errors="surrogatepass"))
            if size > limit:
                raise InputSizeError(size, limit)


def parse_string(
    xml_string: str,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> Dict[str, OutputValue]:
    """Convert a document held in a string to its JSON object value.

    Args:
        xml_string: Complete document text
        config: Optional parser configuration
        correlation_id: Optional correlation ID for request tracking

    Returns:
        Singleton mapping ``{root_name: value}``

    Examples:
        >>> parse_string("<p>hello</p>")
        {'p': 'hello'}
        >>> parse_string('<p id="1"></p>')
        {'p': {'_id': '1'}}
    """
    return XMLToJSONParser(config, correlation_id).parse_value(xml_string)


def parse_bytes(
    data: bytes,
    encoding: str = DEFAULT_ENCODING,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> Dict[str, OutputValue]:
    """Decode bytes and convert the resulting document.

    Raises:
        InputDecodingError: If data is not valid in the given encoding
    """
    try:
        text = data.decode(encoding)
    except (UnicodeDecodeError, LookupError) as e:
        raise InputDecodingError(f"Could not decode input as {encoding}: {e}") from e
    return parse_string(text, config, correlation_id)


def parse_file(
    file_path: Union[str, Path],
    encoding: str = DEFAULT_ENCODING,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> Dict[str, OutputValue]:
    """Read a file and convert its document.

    Args:
        file_path: Path to the document (string or Path object)
        encoding: Text encoding of the file
        config: Optional parser configuration
        correlation_id: Optional correlation ID for request tracking

    Returns:
        Singleton mapping ``{root_name: value}``

    Raises:
        OSError: If the file cannot be read
        InputDecodingError: If the file is not valid in the given encoding
    """
    logger = get_logger(__name__, correlation_id, "parse_file")
    path_obj = Path(file_path)

    logger.info("Starting file parse operation", extra={"file_path": str(path_obj)})

    return parse_bytes(path_obj.read_bytes(), encoding, config, correlation_id)


def parse(
    input_data: InputType,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> Dict[str, OutputValue]:
    """Convert a document from a string, bytes, Path or file-like object.

    Args:
        input_data: Document as str, UTF-8 bytes, Path, or object with read()
        config: Optional parser configuration
        correlation_id: Optional correlation ID for request tracking

    Returns:
        Singleton mapping ``{root_name: value}``

    Raises:
        TypeError: If input_data is none of the supported types
    """
    if isinstance(input_data, str):
        return parse_string(input_data, config, correlation_id)
    if isinstance(input_data, bytes):
        return parse_bytes(input_data, DEFAULT_ENCODING, config, correlation_id)
    if isinstance(input_data, Path):
        return parse_file(input_data, DEFAULT_ENCODING, config, correlation_id)
    if hasattr(input_data, "read"):
        content = input_data.read()
        if isinstance(content, bytes):
            return parse_bytes(content, DEFAULT_ENCODING, config, correlation_id)
        return parse_string(content, config, correlation_id)

    raise TypeError(f"Unsupported input type: {type(input_data).__name__}")


def to_json(
    value: Any,
    indent: Optional[int] = 2,
    ensure_ascii: bool = False
) -> str:
    """Serialize an output value to JSON, keeping mapping keys in insertion order.

    Examples:
        >>> to_json({"p": {"_id": "1", "_text": "x"}}, indent=None)
        '{"p": {"_id": "1", "_text": "x"}}'
    """
    return json.dumps(value, indent=indent, ensure_ascii=ensure_ascii, sort_keys=False)
