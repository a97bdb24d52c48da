"""Fold a concrete parse tree into the JSON object model.

Each element becomes a singleton mapping ``{name: value}`` where value is built
under these conventions:

- attribute ``k="v"`` is stored under ``"_" + k``;
- each child element's singleton mapping is merged in, later siblings with the
  same name overwriting earlier ones;
- text runs are trimmed, empty runs discarded and the rest concatenated. The
  text is kept only when the element has no child elements: it collapses to a
  bare string when there are no attributes, otherwise it is stored under
  ``"_text"``.

Names start with an ASCII letter, so underscore keys never collide with child
element keys.
"""

import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from xml_to_json_parser.grammar.nodes import ParseNode, Rule, SourcePosition
from xml_to_json_parser.shared.config import TransformConfig
from xml_to_json_parser.shared.errors import NestingDepthError, TagMismatchError
from xml_to_json_parser.shared.logging import get_logger
from xml_to_json_parser.shared.result import (
    DiagnosticEntry,
    DiagnosticSeverity,
    OutputValue,
    ParseMetrics,
)

ATTRIBUTE_PREFIX = "_"
TEXT_KEY = "_text"
COMPONENT_NAME = "tree_transformer"


@dataclass
class TransformResult:
    """Output of folding one document."""

    value: Dict[str, OutputValue]
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    metrics: ParseMetrics = field(default_factory=ParseMetrics)


@dataclass
class _FoldContext:
    """Per-call accumulators, so the transformer itself stays stateless."""

    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    metrics: ParseMetrics = field(default_factory=ParseMetrics)
    depth: int = 1
    offset: int = 0


class TreeTransformer:
    """Depth-first transformer from parse nodes to output values."""

    def __init__(
        self,
        correlation_id: Optional[str] = None,
        config: Optional[TransformConfig] = None
    ) -> None:
        """Initialize the transformer.

        Args:
            correlation_id: Optional correlation ID for tracking requests
            config: Reporting options for dropped and overwritten content
        """
        self.correlation_id = correlation_id
        self.config = config or TransformConfig()
        self.logger = get_logger(__name__, correlation_id, COMPONENT_NAME)

    def transform(self, node: ParseNode) -> TransformResult:
        """Fold a document or element node into a singleton mapping.

        Args:
            node: A ``Rule.DOCUMENT`` or ``Rule.ELEMENT`` node

        Returns:
            TransformResult with the value, diagnostics and counters

        Raises:
            TagMismatchError: If any element's close tag names a different tag
            NestingDepthError: If nesting exceeds the interpreter stack
            ValueError: If node is neither a document nor an element
        """
        start_time = time.time()

        if node.rule is Rule.DOCUMENT:
            element = node.first(Rule.ELEMENT)
            if element is None:
                raise ValueError("Document node has no element")
        elif node.rule is Rule.ELEMENT:
            element = node
        else:
            raise ValueError(f"Cannot transform a {node.rule.value} node")

        context = _FoldContext(offset=element.start)
        try:
            value = self._fold_element(element, context)
        except RecursionError:
            position = SourcePosition.from_offset(node.source, context.offset)
            self.logger.debug(
                "Transformation exhausted the interpreter stack",
                extra={"depth": context.depth, "offset": context.offset}
            )
            raise NestingDepthError(
                max(context.depth - 1, 1),
                context.offset,
                position.line,
                position.column
            ) from None

        context.metrics.processing_time_ms = (time.time() - start_time) * 1000
        context.metrics.characters_processed = len(node.source)

        self.logger.debug(
            "Transformed document",
            extra={
                "elements": context.metrics.elements_transformed,
                "warnings": len(context.diagnostics),
            }
        )
        return TransformResult(value, context.diagnostics, context.metrics)

    def transform_value(self, node: ParseNode) -> Dict[str, OutputValue]:
        """Fold a document or element node and return only the value."""
        return self.transform(node).value

    def _fold_element(
        self, element: ParseNode, context: _FoldContext
    ) -> Dict[str, OutputValue]:
        children = iter(element.children)
        name, attributes = self._read_open_tag(next(children))

        nested: List[Tuple[str, OutputValue, ParseNode]] = []
        text_parts: List[str] = []
        close_name: Optional[str] = None
        close_node: Optional[ParseNode] = None

        for child in children:
            if child.rule is Rule.ELEMENT:
                context.depth += 1
                context.offset = child.start
                child_value = self._fold_element(child, context)
                context.depth -= 1
                child_name, child_content = next(iter(child_value.items()))
                nested.append((child_name, child_content, child))
            elif child.rule is Rule.INNER_TEXT:
                text = child.text.strip()
                if text:
                    text_parts.append(text)
                    context.metrics.text_fragments_kept += 1
                else:
                    context.metrics.text_fragments_discarded += 1
            elif child.rule is Rule.CLOSE_TAG:
                close_node = child
                close_name = child.children[0].text

        if close_node is None or close_name is None:
            raise TagMismatchError(name, "", element.end)
        if close_name != name:
            raise TagMismatchError(name, close_name, close_node.start)

        mapping: Dict[str, OutputValue] = {}
        for key, value in attributes:
            mapping[ATTRIBUTE_PREFIX + key] = value
        context.metrics.attributes_collected += len(attributes)

        text_content = "".join(text_parts)

        if nested:
            for child_name, child_content, child in nested:
                if child_name in mapping:
                    self._report_overwrite(name, child_name, child, context)
                mapping[child_name] = child_content
            if text_content:
                self._report_dropped_text(name, text_content, element, context)
        elif text_content:
            if not mapping:
                context.metrics.elements_transformed += 1
                return {name: text_content}
            if TEXT_KEY in mapping:
                self._report_overwrite(name, TEXT_KEY, element, context)
            mapping[TEXT_KEY] = text_content

        context.metrics.elements_transformed += 1
        return {name: mapping}

    def _read_open_tag(self, open_tag: ParseNode) -> Tuple[str, List[Tuple[str, str]]]:
        """Extract the tag name and ordered attribute pairs."""
        name = open_tag.children[0].text
        attributes = []
        for attribute in open_tag.children_of(Rule.ATTRIBUTE):
            key, value = attribute.children
            attributes.append((key.text, value.text))
        return name, attributes

    def _report_overwrite(
        self, element_name: str, key: str, node: ParseNode, context: _FoldContext
    ) -> None:
        if not self.config.report_overwritten_keys:
            return
        position = node.position
        context.diagnostics.append(
            DiagnosticEntry(
                severity=DiagnosticSeverity.WARNING,
                message=f"Key '{key}' in <{element_name}> overwritten by a later value",
                component=COMPONENT_NAME,
                position={
                    "offset": position.offset,
                    "line": position.line,
                    "column": position.column,
                },
                details={"element": element_name, "key": key},
                correlation_id=self.correlation_id,
            )
        )

    def _report_dropped_text(
        self, element_name: str, text: str, node: ParseNode, context: _FoldContext
    ) -> None:
        if not self.config.report_dropped_text:
            return
        position = node.position
        context.diagnostics.append(
            DiagnosticEntry(
                severity=DiagnosticSeverity.WARNING,
                message=f"Text in <{element_name}> dropped because it has child elements",
                component=COMPONENT_NAME,
                position={
                    "offset": position.offset,
                    "line": position.line,
                    "column": position.column,
                },
                details={"element": element_name, "text": text},
                correlation_id=self.correlation_id,
            )
        )
