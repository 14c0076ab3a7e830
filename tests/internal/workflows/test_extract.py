"""Tests for tolerant JSON extraction."""

import json

import pytest
from pydantic import BaseModel

from jixi_sdk._internal.workflows.extract import (
    coerce_string_result,
    decode_json_array,
    extract_string_field,
    make_decoder,
)
from jixi_sdk._internal.workflows.models import WorkflowEntry
from jixi_sdk.exceptions import JixiDecodeError


class Caption(BaseModel):
    text: str
    score: float | None = None


class TestExtractStringField:
    """Tests for extract_string_field()."""

    @pytest.mark.parametrize(
        "body",
        [
            '{"url":"X"}',
            '{"x":"y","url":"X"}',
            '{ "url" : "X" }',
            '{"meta": {"id": 1}, "url": "X", "other": "Z"}',
        ],
    )
    def test_extracts_url(self, body):
        """Should find the url value whatever else the object holds."""
        assert extract_string_field(body, "url") == "X"

    def test_escaped_quotes_do_not_terminate(self):
        """Should treat \\" as part of the value and unescape it."""
        body = r'{"url": "a\"b\"c"}'
        assert extract_string_field(body, "url") == 'a"b"c'

    def test_missing_key(self):
        """Should return None when the key is absent."""
        assert extract_string_field('{"other": "X"}', "url") is None

    def test_missing_colon(self):
        """Should return None when no colon follows the key."""
        assert extract_string_field('{"url"', "url") is None

    def test_missing_closing_quote(self):
        """Should return None when the value never closes."""
        assert extract_string_field('{"url": "unterminated', "url") is None

    def test_non_string_value_has_no_quote(self):
        """Should return None when nothing quoted follows the colon."""
        assert extract_string_field('{"url": 42}', "url") is None

    def test_empty_input(self):
        """Should return None for empty or None input."""
        assert extract_string_field("", "url") is None
        assert extract_string_field(None, "url") is None

    def test_other_field_name(self):
        """Should scrape any requested field."""
        assert extract_string_field('{"id": "abc", "url": "X"}', "id") == "abc"


class TestCoerceStringResult:
    """Tests for the string decoding policy."""

    @pytest.mark.parametrize("body", ['{"url":"X"}', '{"x":"y","url":"X"}', '"X"', "  X\n"])
    def test_yields_x(self, body):
        """Envelope, quoted literal and bare text should all yield X."""
        assert coerce_string_result(body) == "X"

    def test_object_without_url_is_returned_verbatim(self):
        """An object lacking a url field should come back trimmed but whole."""
        assert coerce_string_result(' {"status": "done"} ') == '{"status": "done"}'

    def test_empty_body(self):
        """Should return an empty string for an empty body."""
        assert coerce_string_result("") == ""
        assert coerce_string_result(None) == ""


class TestDecodeJsonArray:
    """Tests for root-array decoding."""

    @pytest.mark.parametrize(
        ("text", "item_type"),
        [
            ("[1,2,3]", int),
            ("[1,2,3]", float),
            ('["a","b"]', str),
            ("[]", int),
            ("  [true, false]  ", bool),
        ],
    )
    def test_matches_unwrapped_decode(self, text, item_type):
        """Wrapped decoding should equal decoding the bare array."""
        assert decode_json_array(text, item_type) == [item_type(v) for v in json.loads(text)]

    def test_decodes_models(self):
        """Should decode an array of objects into models."""
        text = '[{"name": "a", "url": "https://api/a"}, {"name": "b", "url": "https://api/b"}]'
        result = decode_json_array(text, WorkflowEntry)
        assert result == [
            WorkflowEntry(name="a", url="https://api/a"),
            WorkflowEntry(name="b", url="https://api/b"),
        ]

    def test_invalid_json_raises_decode_error(self):
        """Should raise JixiDecodeError on malformed input."""
        with pytest.raises(JixiDecodeError):
            decode_json_array("[1, 2", int)

    def test_wrong_item_type_raises_decode_error(self):
        """Should raise JixiDecodeError when items do not match the type."""
        with pytest.raises(JixiDecodeError):
            decode_json_array('["x"]', int)


class TestMakeDecoder:
    """Tests for make_decoder()."""

    def test_str(self):
        """str should use tolerant extraction."""
        assert make_decoder(str)('{"url": "https://cdn/x.png"}') == "https://cdn/x.png"

    def test_model(self):
        """A model class should decode the body as that model."""
        result = make_decoder(Caption)('{"text": "a cat", "score": 0.5}')
        assert result == Caption(text="a cat", score=0.5)

    def test_model_decode_failure(self):
        """A body that does not fit the model should raise JixiDecodeError."""
        with pytest.raises(JixiDecodeError) as exc_info:
            make_decoder(Caption)("not json")
        assert "Caption" in str(exc_info.value)

    def test_list_of_models(self):
        """list[X] should decode a root array of X."""
        result = make_decoder(list[Caption])('[{"text": "a"}, {"text": "b"}]')
        assert [c.text for c in result] == ["a", "b"]

    def test_dict(self):
        """dict should return the plain decoded JSON."""
        assert make_decoder(dict)('{"a": [1, 2]}') == {"a": [1, 2]}

    def test_dict_decode_failure(self):
        """Malformed JSON should raise JixiDecodeError."""
        with pytest.raises(JixiDecodeError):
            make_decoder(dict)("{oops")

    def test_unsupported_type(self):
        """Unsupported result types should be rejected up front."""
        with pytest.raises(TypeError):
            make_decoder(int)

    def test_unsupported_list_item_type(self):
        """A list of a type pydantic cannot validate should be rejected up front."""

        class Plain:
            pass

        with pytest.raises(TypeError, match="Unsupported list item type"):
            make_decoder(list[Plain])
