"""Tests for the error hierarchy."""

from xml_to_json_parser.shared.errors import (
    EmptyInputError,
    InputSizeError,
    NestingDepthError,
    StructuralError,
    TagMismatchError,
    XMLToJSONError,
)


class TestErrors:
    """Test error attributes and messages."""

    def test_empty_input_message(self):
        """Test the default empty-input message."""
        assert str(EmptyInputError()) == "XML is empty"
        assert isinstance(EmptyInputError(), XMLToJSONError)

    def test_structural_error_without_line(self):
        """Test the message falls back to the offset alone."""
        error = StructuralError("open_tag", 3, "'>'")
        assert str(error) == "Expected '>' in open_tag at offset 3"
        assert error.line is None

    def test_structural_error_with_line(self):
        """Test the message includes line and column when known."""
        error = StructuralError("name", 7, "an ASCII letter", 2, 4)
        assert str(error) == (
            "Expected an ASCII letter in name at line 2, column 4 (offset 7)"
        )

    def test_nesting_depth_error(self):
        """Test nesting errors are structural errors at the element production."""
        error = NestingDepthError(10, 42)
        assert isinstance(error, StructuralError)
        assert error.rule == "element"
        assert error.max_depth == 10
        assert "nesting depth of at most 10" in str(error)

    def test_tag_mismatch_names_both_tags(self):
        """Test the mismatch message names both tags."""
        error = TagMismatchError("parser", "qwerty", 12)
        assert error.open_name == "parser"
        assert error.close_name == "qwerty"
        assert "<parser>" in str(error)
        assert "</qwerty>" in str(error)

    def test_input_size_error(self):
        """Test size and limit are recorded."""
        error = InputSizeError(20, 10)
        assert (error.size_bytes, error.limit_bytes) == (20, 10)
