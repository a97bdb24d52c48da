"""Comprehensive tests for grammar recognition."""

import pytest

from xml_to_json_parser.grammar import GrammarRecognizer, Rule
from xml_to_json_parser.shared.errors import NestingDepthError, StructuralError


@pytest.fixture
def recognizer():
    """Recognizer with default settings."""
    return GrammarRecognizer()


class TestInnerText:
    """Tests for the inner_text production."""

    def test_basic_text(self, recognizer):
        """Test plain text is matched completely."""
        node = recognizer.recognize("some text", Rule.INNER_TEXT)
        assert node.rule is Rule.INNER_TEXT
        assert node.text == "some text"

    def test_text_with_numbers_and_special_symbols(self, recognizer):
        """Test digits and punctuation are ordinary text characters."""
        text = "1234 f./.ferf $% ^&*( some text"
        node = recognizer.recognize(text, Rule.INNER_TEXT)
        assert node.text == text

    def test_stops_before_open_bracket(self, recognizer):
        """Test text ends at the next '<'."""
        node = recognizer.recognize("abc<d>", Rule.INNER_TEXT)
        assert node.text == "abc"
        assert (node.start, node.end) == (0, 3)

    def test_fails_when_open_bracket_appears_at_front(self, recognizer):
        """Test text cannot start with '<'."""
        with pytest.raises(StructuralError) as exc_info:
            recognizer.recognize("<some text", Rule.INNER_TEXT)
        assert exc_info.value.rule == "inner_text"
        assert exc_info.value.offset == 0

    def test_fails_when_string_is_empty(self, recognizer):
        """Test text must contain at least one character."""
        with pytest.raises(StructuralError):
            recognizer.recognize("", Rule.INNER_TEXT)

    def test_whitespace_only_text_is_recognized(self, recognizer):
        """Test whitespace runs are text; trimming happens later."""
        node = recognizer.recognize("  \n ", Rule.INNER_TEXT)
        assert node.text == "  \n "


class TestName:
    """Tests for the name production."""

    @pytest.mark.parametrize("name", ["parser", "parser111", "a_b-c9", "X"])
    def test_valid_names(self, recognizer, name):
        """Test letters followed by letters, digits, '_' or '-' are accepted."""
        assert recognizer.recognize(name, Rule.NAME).text == name

    @pytest.mark.parametrize("name", ["1parser", "_x", "-x", " x", ""])
    def test_invalid_first_character(self, recognizer, name):
        """Test names must start with an ASCII letter."""
        with pytest.raises(StructuralError) as exc_info:
            recognizer.recognize(name, Rule.NAME)
        assert exc_info.value.rule == "name"
        assert exc_info.value.offset == 0

    def test_non_ascii_first_letter_rejected(self, recognizer):
        """Test only ASCII letters may start a name."""
        with pytest.raises(StructuralError):
            recognizer.recognize("ärger", Rule.NAME)

    def test_name_stops_at_invalid_character(self, recognizer):
        """Test the name ends at the first character outside the name set."""
        assert recognizer.recognize("ab cd", Rule.NAME).text == "ab"
        assert recognizer.recognize("ab.cd", Rule.NAME).text == "ab"


class TestAttribute:
    """Tests for the attribute and attribute_value productions."""

    def test_attribute_with_spaces_around_equals(self, recognizer):
        """Test whitespace is allowed around '='."""
        node = recognizer.recognize('id = "1"', Rule.ATTRIBUTE)
        name, value = node.children
        assert name.rule is Rule.NAME
        assert name.text == "id"
        assert value.rule is Rule.ATTRIBUTE_VALUE
        assert value.text == "1"

    def test_attribute_value_keeps_inner_whitespace(self, recognizer):
        """Test attribute values are not trimmed."""
        node = recognizer.recognize('author="  Artur Nozhenko "', Rule.ATTRIBUTE)
        assert node.children[1].text == "  Artur Nozhenko "

    def test_empty_attribute_value(self, recognizer):
        """Test empty quoted values are accepted."""
        node = recognizer.recognize('id=""', Rule.ATTRIBUTE)
        assert node.children[1].text == ""

    def test_attribute_value_production(self, recognizer):
        """Test attribute_value matches up to the next quote."""
        assert recognizer.recognize('abc"rest', Rule.ATTRIBUTE_VALUE).text == "abc"
        assert recognizer.recognize('"', Rule.ATTRIBUTE_VALUE).text == ""

    def test_missing_closing_quote(self, recognizer):
        """Test an unterminated value fails at end of input."""
        with pytest.raises(StructuralError) as exc_info:
            recognizer.recognize('id="1', Rule.ATTRIBUTE)
        assert exc_info.value.rule == "attribute"
        assert exc_info.value.offset == 5

    def test_unquoted_value(self, recognizer):
        """Test values must be quoted."""
        with pytest.raises(StructuralError) as exc_info:
            recognizer.recognize("id=1", Rule.ATTRIBUTE)
        assert exc_info.value.rule == "attribute"
        assert exc_info.value.offset == 3

    def test_missing_equals(self, recognizer):
        """Test attributes require '='."""
        with pytest.raises(StructuralError) as exc_info:
            recognizer.recognize('id "1"', Rule.ATTRIBUTE)
        assert exc_info.value.rule == "attribute"


class TestTags:
    """Tests for the open_tag and close_tag productions."""

    def test_open_tag_with_attributes(self, recognizer):
        """Test attribute order is preserved and trailing whitespace allowed."""
        node = recognizer.recognize('<a x="1"   y = "2" >', Rule.OPEN_TAG)
        assert node.children[0].text == "a"
        attributes = list(node.children_of(Rule.ATTRIBUTE))
        assert [attr.children[0].text for attr in attributes] == ["x", "y"]
        assert [attr.children[1].text for attr in attributes] == ["1", "2"]

    def test_open_tag_requires_whitespace_between_attributes(self, recognizer):
        """Test attributes must be separated by whitespace."""
        with pytest.raises(StructuralError) as exc_info:
            recognizer.recognize('<a x="1"y="2">', Rule.OPEN_TAG)
        assert exc_info.value.rule == "open_tag"
        assert exc_info.value.offset == 8

    def test_open_tag_missing_bracket(self, recognizer):
        """Test an open tag must end with '>'."""
        with pytest.raises(StructuralError) as exc_info:
            recognizer.recognize("<a", Rule.OPEN_TAG)
        assert exc_info.value.rule == "open_tag"
        assert exc_info.value.offset == 2

    def test_close_tag_with_whitespace_around_name(self, recognizer):
        """Test whitespace is allowed around the close tag's name."""
        node = recognizer.recognize("</ a >", Rule.CLOSE_TAG)
        assert node.children[0].text == "a"

    def test_close_tag_requires_slash(self, recognizer):
        """Test a close tag starts with '</'."""
        with pytest.raises(StructuralError) as exc_info:
            recognizer.recognize("<a>", Rule.CLOSE_TAG)
        assert exc_info.value.rule == "close_tag"
        assert exc_info.value.offset == 1


class TestDocument:
    """Tests for the element and document productions."""

    def test_document_with_surrounding_whitespace(self, recognizer):
        """Test leading and trailing whitespace around the root is allowed."""
        node = recognizer.recognize("  <a>x</a>\n", Rule.DOCUMENT)
        assert node.rule is Rule.DOCUMENT
        element = node.first(Rule.ELEMENT)
        assert [child.rule for child in element.children] == [
            Rule.OPEN_TAG, Rule.INNER_TEXT, Rule.CLOSE_TAG
        ]

    def test_nested_elements_and_text_in_order(self, recognizer):
        """Test element content keeps document order."""
        node = recognizer.recognize("<a>t1<b>x</b>t2</a>", Rule.ELEMENT)
        assert [child.rule for child in node.children] == [
            Rule.OPEN_TAG,
            Rule.INNER_TEXT,
            Rule.ELEMENT,
            Rule.INNER_TEXT,
            Rule.CLOSE_TAG,
        ]

    def test_nodes_index_into_source(self, recognizer):
        """Test nodes share the input buffer instead of copying it."""
        text = "<a>x</a>"
        node = recognizer.recognize(text, Rule.DOCUMENT)
        assert node.source is text
        assert node.first(Rule.ELEMENT).source is text

    def test_mismatched_names_are_recognized(self, recognizer):
        """Test tag-name equality is not a grammar concern."""
        node = recognizer.recognize("<a>x</b>", Rule.DOCUMENT)
        close_tag = node.first(Rule.ELEMENT).first(Rule.CLOSE_TAG)
        assert close_tag.children[0].text == "b"

    def test_missing_close_tag(self, recognizer):
        """Test an unterminated element fails at end of input."""
        with pytest.raises(StructuralError) as exc_info:
            recognizer.recognize("<a>x", Rule.DOCUMENT)
        assert exc_info.value.rule == "close_tag"
        assert exc_info.value.offset == 4

    def test_missing_open_tag(self, recognizer):
        """Test a document must start with an element."""
        with pytest.raises(StructuralError) as exc_info:
            recognizer.recognize("XML_to_JSON</parser>", Rule.DOCUMENT)
        assert exc_info.value.rule == "open_tag"
        assert exc_info.value.offset == 0

    def test_two_root_elements(self, recognizer):
        """Test a document holds exactly one top-level element."""
        with pytest.raises(StructuralError) as exc_info:
            recognizer.recognize("<a>x</a><b></b>", Rule.DOCUMENT)
        assert exc_info.value.rule == "document"
        assert exc_info.value.offset == 8

    def test_bad_tag_name(self, recognizer):
        """Test '<' inside a tag name is rejected."""
        with pytest.raises(StructuralError):
            recognizer.recognize("<parser<vfvew>XML</parser<vfvew>", Rule.DOCUMENT)

    def test_empty_document(self, recognizer):
        """Test the empty string is not a document."""
        with pytest.raises(StructuralError):
            recognizer.recognize("", Rule.DOCUMENT)

    def test_error_reports_line_and_column(self, recognizer):
        """Test structural errors carry line and column information."""
        with pytest.raises(StructuralError) as exc_info:
            recognizer.recognize("<a>\n  <1b></1b>\n</a>", Rule.DOCUMENT)
        error = exc_info.value
        assert error.rule == "name"
        assert error.offset == 7
        assert (error.line, error.column) == (2, 4)
        assert "line 2, column 4" in str(error)


class TestNestingDepth:
    """Tests for the nesting depth guard."""

    def test_depth_at_limit_is_accepted(self):
        """Test nesting exactly at the limit succeeds."""
        recognizer = GrammarRecognizer(max_nesting_depth=3)
        node = recognizer.recognize("<a><b><c>v</c></b></a>", Rule.DOCUMENT)
        assert node.rule is Rule.DOCUMENT

    def test_depth_beyond_limit_fails(self):
        """Test nesting past the limit raises NestingDepthError."""
        recognizer = GrammarRecognizer(max_nesting_depth=3)
        with pytest.raises(NestingDepthError) as exc_info:
            recognizer.recognize("<a><b><c><d>v</d></c></b></a>", Rule.DOCUMENT)
        assert isinstance(exc_info.value, StructuralError)
        assert exc_info.value.max_depth == 3
        assert exc_info.value.offset == 9
        assert exc_info.value.rule == "element"

    def test_no_limit(self):
        """Test the guard can be disabled."""
        depth = 300
        text = "".join(f"<e{i}>" for i in range(depth)) + "v" + "".join(
            f"</e{i}>" for i in reversed(range(depth))
        )
        recognizer = GrammarRecognizer(max_nesting_depth=None)
        assert recognizer.recognize(text, Rule.DOCUMENT).rule is Rule.DOCUMENT

    def test_stack_exhaustion_without_limit(self):
        """Test nesting beyond the interpreter stack raises NestingDepthError."""
        depth = 3000
        text = "<a>" * depth + "v" + "</a>" * depth
        recognizer = GrammarRecognizer(max_nesting_depth=None)
        with pytest.raises(NestingDepthError) as exc_info:
            recognizer.recognize(text, Rule.DOCUMENT)
        assert exc_info.value.rule == "element"
        assert 1 <= exc_info.value.max_depth < depth

    def test_stack_exhaustion_above_limit(self):
        """Test a limit above the interpreter stack still fails cleanly."""
        depth = 3000
        text = "<a>" * depth + "</a>" * depth
        recognizer = GrammarRecognizer(max_nesting_depth=100000)
        with pytest.raises(NestingDepthError):
            recognizer.recognize(text, Rule.DOCUMENT)
