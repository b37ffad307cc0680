"""
Token accessors used for manual schema extraction.
"""

import math
import re

from .errors import ParseError
from .json_tokenizer import JsonToken, TokenType

MAX_NUMBER_LENGTH = 63

INT32_MIN = -2 ** 31
INT32_MAX = 2 ** 31 - 1

# Longest leading decimal float literal (or inf/nan). Hex floats are not
# recognised.
_FLOAT_PREFIX = re.compile(
    r"\s*[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)


def token_text(text: str, token: JsonToken) -> str:
    """Raw span of a token."""
    return text[token.start:token.end]


def token_equals_string(text: str, token: JsonToken, literal: str) -> bool:
    """True iff the token is a string whose raw span equals ``literal``."""
    if token.type != TokenType.STRING:
        return False
    if token.end - token.start != len(literal):
        return False
    return text.startswith(literal, token.start)


def token_to_double(text: str, token: JsonToken) -> float:
    """
    Parse a token span as a float.

    The span is clipped to 63 characters. Empty spans, and spans without a
    leading number, give 0.0; trailing garbage after a number is ignored.
    """
    length = token.end - token.start
    if length <= 0:
        return 0.0
    length = min(length, MAX_NUMBER_LENGTH)
    match = _FLOAT_PREFIX.match(text, token.start, token.start + length)
    if match is None:
        return 0.0
    return float(match.group(0))


def token_to_int(text: str, token: JsonToken) -> int:
    """
    Nearest integer to ``token_to_double``; halves round away from zero.

    Raises:
        ParseError: The value is not finite or does not fit in an int32
    """
    value = token_to_double(text, token)
    if not math.isfinite(value):
        raise ParseError(f"'{token_text(text, token)}' is not a finite number", token.start)
    result = int(math.copysign(math.floor(abs(value) + 0.5), value))
    if not INT32_MIN <= result <= INT32_MAX:
        raise ParseError(f"'{token_text(text, token)}' is out of int32 range", token.start)
    return result
