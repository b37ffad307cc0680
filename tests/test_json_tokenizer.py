"""Tokenizer acceptance and rejection."""

import pytest

from city_road_network import ParseError
from city_road_network.json_tokenizer import (
    JsonParser,
    JsonToken,
    TokenType,
    UNSET,
    default_token_capacity,
    tokenize,
)


def spans(text, tokens):
    return [text[t.start:t.end] for t in tokens]


class TestAcceptance:
    def test_empty_segments_document(self):
        text = '{"segments":[]}'
        tokens = tokenize(text)
        assert [t.type for t in tokens] == [
            TokenType.OBJECT, TokenType.STRING, TokenType.ARRAY
        ]
        root, key, array = tokens
        assert root.size == 2 and root.parent == UNSET
        assert (root.start, root.end) == (0, len(text))
        assert spans(text, [key]) == ["segments"]
        assert key.parent == 0
        assert array.parent == 0 and array.size == 0
        assert (array.start, array.end) == (12, 14)

    def test_nested_parents_and_sizes(self):
        text = '{"a": [1, [2, 3], {"b": true}], "c": null}'
        tokens = tokenize(text)
        assert spans(text, tokens) == [
            text, "a", '[1, [2, 3], {"b": true}]', "1", "[2, 3]", "2", "3",
            '{"b": true}', "b", "true", "c", "null",
        ]
        assert [t.parent for t in tokens] == [-1, 0, 0, 2, 2, 4, 4, 2, 7, 7, 0, 0]
        assert tokens[0].size == 4
        assert tokens[2].size == 3
        assert tokens[4].size == 2
        assert tokens[7].size == 2

    def test_primitive_at_end_of_text(self):
        tokens = tokenize("12.5")
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.PRIMITIVE
        assert (tokens[0].start, tokens[0].end) == (0, 4)

    def test_escaped_quote_does_not_end_string(self):
        text = r'{"k": "a\"b"}'
        tokens = tokenize(text)
        assert spans(text, tokens)[2] == r'a\"b'

    def test_whitespace_and_separators_are_skipped(self):
        text = '\n\t{ "x" :\r\n -1.5e3 , "y":2 }\n'
        tokens = tokenize(text)
        assert spans(text, tokens[1:]) == ["x", "-1.5e3", "y", "2"]

    def test_empty_text_has_no_tokens(self):
        assert tokenize("") == []

    def test_parser_cursor_state(self):
        text = '[1, 2]'
        tokens = [JsonToken() for _ in range(8)]
        parser = JsonParser()
        assert parser.parse(text, tokens) == 3
        assert parser.next_token_index == 3
        assert parser.super_token_index == UNSET
        assert parser.position == len(text)


class TestRejection:
    @pytest.mark.parametrize("text", [
        '{"a":"b',
        '{"a":1]',
        '[1, 2}',
        '{"a": [1, 2}',
        ']',
        '{"a": 1}}',
        '{"a": [1, 2]',
        '[[]',
        '"open',
        '"ends with backslash\\',
    ])
    def test_malformed(self, text):
        with pytest.raises(ParseError):
            tokenize(text)

    def test_control_character_in_primitive(self):
        with pytest.raises(ParseError, match="control character"):
            tokenize('[1\x012]')

    def test_control_character_in_string(self):
        with pytest.raises(ParseError, match="control character"):
            tokenize('["a\x02b"]')

    def test_pool_exhaustion(self):
        with pytest.raises(ParseError, match="pool exhausted"):
            tokenize('[1, 2, 3]', capacity=3)
        assert len(tokenize('[1, 2, 3]', capacity=4)) == 4

    def test_error_reports_offset(self):
        with pytest.raises(ParseError) as excinfo:
            tokenize('{"a":1]')
        assert excinfo.value.position == 6


def test_default_capacity():
    assert default_token_capacity(0) == 256
    assert default_token_capacity(4000) == 1256
