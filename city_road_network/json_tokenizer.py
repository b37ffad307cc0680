"""
Single-pass JSON tokenizer with a fixed, index-addressed token pool.

Tokens record spans into the source text; nothing is decoded. The container
tree is encoded by ``parent`` indices, and the innermost open container is
tracked by index rather than with an explicit stack.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import List, Optional

from .errors import ParseError

UNSET = -1

WHITESPACE = ('\t', '\r', '\n', ' ')
PRIMITIVE_TERMINATORS = WHITESPACE + (',', ']', '}')


class TokenType(IntEnum):
    UNDEFINED = 0
    OBJECT = 1
    ARRAY = 2
    STRING = 3
    PRIMITIVE = 4


@dataclass
class JsonToken:
    """Span of one JSON value; strings exclude their quotes."""

    type: TokenType = TokenType.UNDEFINED
    start: int = UNSET
    end: int = UNSET
    size: int = 0
    parent: int = UNSET

    @property
    def is_open(self) -> bool:
        return self.start != UNSET and self.end == UNSET

    def reset(self):
        self.type = TokenType.UNDEFINED
        self.start = UNSET
        self.end = UNSET
        self.size = 0
        self.parent = UNSET


def default_token_capacity(text_length: int) -> int:
    """Pool size used for a document of ``text_length`` characters."""
    return text_length // 4 + 256


class JsonParser:
    """Parser cursor over one document."""

    def __init__(self):
        self.position = 0
        self.next_token_index = 0
        self.super_token_index = UNSET

    def _allocate_token(self, tokens: List[JsonToken]) -> JsonToken:
        if self.next_token_index >= len(tokens):
            raise ParseError(
                f"token pool exhausted ({len(tokens)} tokens)", self.position
            )
        token = tokens[self.next_token_index]
        self.next_token_index += 1
        token.reset()
        return token

    def _count_child(self, tokens: List[JsonToken]):
        if self.super_token_index != UNSET:
            tokens[self.super_token_index].size += 1

    def _parse_string(self, text: str, tokens: List[JsonToken]):
        start = self.position
        self.position += 1

        while self.position < len(text):
            c = text[self.position]
            if c == '"':
                token = self._allocate_token(tokens)
                token.type = TokenType.STRING
                token.start = start + 1
                token.end = self.position
                token.parent = self.super_token_index
                return
            if c == '\\':
                self.position += 1
                if self.position >= len(text):
                    break
            elif ord(c) < 32:
                raise ParseError("control character in string", self.position)
            self.position += 1

        raise ParseError("unterminated string", start)

    def _parse_primitive(self, text: str, tokens: List[JsonToken]):
        start = self.position

        while self.position < len(text):
            c = text[self.position]
            if c in PRIMITIVE_TERMINATORS:
                break
            if ord(c) < 32:
                raise ParseError("control character in primitive", self.position)
            self.position += 1

        token = self._allocate_token(tokens)
        token.type = TokenType.PRIMITIVE
        token.start = start
        token.end = self.position
        token.parent = self.super_token_index
        # The main loop steps past the terminator itself.
        self.position -= 1

    def _close_container(self, closer: str, tokens: List[JsonToken]):
        expected = TokenType.OBJECT if closer == '}' else TokenType.ARRAY
        index = self.next_token_index - 1
        while index >= 0:
            token = tokens[index]
            if token.is_open:
                if token.type != expected:
                    raise ParseError(f"mismatched '{closer}'", self.position)
                token.end = self.position + 1
                self.super_token_index = token.parent
                return
            index -= 1
        raise ParseError(f"unmatched '{closer}'", self.position)

    def parse(self, text: str, tokens: List[JsonToken]) -> int:
        """
        Tokenize ``text`` into the preallocated ``tokens`` pool.

        Args:
            text: JSON document
            tokens: Token pool; its length is the capacity

        Returns:
            Number of tokens allocated

        Raises:
            ParseError: Pool exhausted, unterminated string, control
                character, unmatched or mismatched closer, unclosed container
        """
        while self.position < len(text):
            c = text[self.position]

            if c in ('{', '['):
                token = self._allocate_token(tokens)
                token.type = TokenType.OBJECT if c == '{' else TokenType.ARRAY
                token.start = self.position
                token.parent = self.super_token_index
                self._count_child(tokens)
                self.super_token_index = self.next_token_index - 1
            elif c in ('}', ']'):
                self._close_container(c, tokens)
            elif c == '"':
                self._parse_string(text, tokens)
                self._count_child(tokens)
            elif c in WHITESPACE or c in (':', ','):
                pass
            else:
                self._parse_primitive(text, tokens)
                self._count_child(tokens)

            self.position += 1

        for index in range(self.next_token_index):
            if tokens[index].is_open:
                raise ParseError("unclosed container", tokens[index].start)

        return self.next_token_index


def tokenize(text: str, capacity: Optional[int] = None) -> List[JsonToken]:
    """
    Tokenize a whole document.

    Args:
        text: JSON document
        capacity: Token pool size (``len(text) // 4 + 256`` if None)

    Returns:
        The allocated tokens, in document order
    """
    if capacity is None:
        capacity = default_token_capacity(len(text))
    tokens = [JsonToken() for _ in range(capacity)]
    count = JsonParser().parse(text, tokens)
    del tokens[count:]
    return tokens
