"""
Map file codec.

The writer emits one fixed layout and the loader pulls the fields it needs
straight out of the token pool, without building a document tree.
"""

from pathlib import Path
from typing import List, Optional, Tuple, Union

from .city_map import CityMap
from .errors import CityMapError, MapIOError, ParseError
from .json_fields import token_equals_string, token_to_double, token_to_int
from .json_tokenizer import JsonToken, TokenType, tokenize

PathLike = Union[str, Path]


def _skip_span(tokens: List[JsonToken], index: int, end: int) -> int:
    """First token index at or after ``index`` that starts at or past ``end``."""
    while index < len(tokens) and tokens[index].start < end:
        index += 1
    return index


def _find_segments_array(text: str, tokens: List[JsonToken]) -> int:
    for index in range(1, len(tokens) - 1):
        if tokens[index].parent != 0:
            continue
        if (
            token_equals_string(text, tokens[index], "segments")
            and tokens[index + 1].type == TokenType.ARRAY
        ):
            return index + 1
    raise ParseError("top-level object has no \"segments\" array")


def _read_segment_fields(
    text: str,
    tokens: List[JsonToken],
    object_index: int,
    position: int
) -> Tuple[int, Optional[int]]:
    """
    Scan the keys of one segment object.

    Returns:
        (segment_id, pts_array_index); the id defaults to ``position`` and
        the array index is None when there is no "pts" array
    """
    segment_id = None
    points_index = None
    object_end = tokens[object_index].end

    field_index = object_index + 1
    while field_index + 1 < len(tokens) and tokens[field_index].start < object_end:
        key = tokens[field_index]
        if key.type != TokenType.STRING or key.parent != object_index:
            field_index += 1
            continue

        value = tokens[field_index + 1]
        if segment_id is None and token_equals_string(text, key, "id"):
            segment_id = token_to_int(text, value)
        elif (
            points_index is None
            and token_equals_string(text, key, "pts")
            and value.type == TokenType.ARRAY
        ):
            points_index = field_index + 1

        # Jump over the whole value, however deeply nested.
        field_index = _skip_span(tokens, field_index + 2, value.end)

    if segment_id is None:
        segment_id = position
    return segment_id, points_index


def _read_points(
    text: str,
    tokens: List[JsonToken],
    points_index: int,
    segment_id: int
) -> List[Tuple[float, float]]:
    points = []
    point_token_index = points_index + 1
    for point_i in range(tokens[points_index].size):
        if point_token_index + 2 >= len(tokens):
            raise ParseError(f"segment {segment_id}: point {point_i} is truncated")

        pair = tokens[point_token_index]
        x_token = tokens[point_token_index + 1]
        y_token = tokens[point_token_index + 2]
        if (
            pair.type != TokenType.ARRAY
            or pair.size != 2
            or x_token.type != TokenType.PRIMITIVE
            or y_token.type != TokenType.PRIMITIVE
            or x_token.parent != point_token_index
            or y_token.parent != point_token_index
        ):
            raise ParseError(
                f"segment {segment_id}: point {point_i} is not an [x, y] pair",
                pair.start,
            )

        points.append((token_to_double(text, x_token), token_to_double(text, y_token)))
        point_token_index = _skip_span(tokens, point_token_index + 1, pair.end)
    return points


def loads_city_map(text: str, city_map: Optional[CityMap] = None) -> CityMap:
    """
    Load map text into ``city_map`` (or a new map).

    The map is cleared before segments are read. Any failure leaves it
    empty; prior contents are never restored.

    Raises:
        ParseError: Text is not valid map JSON
        ValidationError: A segment breaks the point-count or axis invariants
    """
    if city_map is None:
        city_map = CityMap()

    try:
        tokens = tokenize(text)
        if not tokens or tokens[0].type != TokenType.OBJECT:
            raise ParseError("document is not a JSON object")
        segments_index = _find_segments_array(text, tokens)
    except CityMapError:
        city_map.clear()
        raise

    city_map.clear()
    try:
        segment_token_index = segments_index + 1
        for segment_i in range(tokens[segments_index].size):
            if segment_token_index >= len(tokens):
                raise ParseError(f"segment {segment_i + 1} is missing")
            segment_token = tokens[segment_token_index]
            if segment_token.type != TokenType.OBJECT:
                raise ParseError(
                    f"segment {segment_i + 1} is not an object", segment_token.start
                )

            segment_id, points_index = _read_segment_fields(
                text, tokens, segment_token_index, segment_i + 1
            )
            if points_index is None:
                raise ParseError(
                    f"segment {segment_id} has no \"pts\" array", segment_token.start
                )

            points = _read_points(text, tokens, points_index, segment_id)
            city_map.append_segment(segment_id, points)

            segment_token_index = _skip_span(
                tokens, segment_token_index + 1, segment_token.end
            )
    except CityMapError:
        city_map.clear()
        raise

    return city_map


def load_city_map(path: PathLike, city_map: Optional[CityMap] = None) -> CityMap:
    """
    Read a map file into ``city_map`` (or a new map).

    Like ``loads_city_map``, any failure leaves the map empty.

    Raises:
        MapIOError: File could not be read
        ParseError: See ``loads_city_map``
        ValidationError: See ``loads_city_map``
    """
    if city_map is None:
        city_map = CityMap()
    try:
        with open(path, 'r', encoding='utf-8') as f:
            text = f.read()
    except UnicodeDecodeError as e:
        city_map.clear()
        raise ParseError(f"{path} is not UTF-8 text: {e}") from e
    except OSError as e:
        city_map.clear()
        raise MapIOError(f"cannot read map file {path}: {e}") from e
    return loads_city_map(text, city_map)


def dumps_city_map(city_map: CityMap, precision: int = 6) -> str:
    """Serialize a map in the fixed, 2-space indented layout."""
    lines = ['{', '  "segments": [']
    segment_count = len(city_map)
    for segment_index, segment in enumerate(city_map):
        lines.append('    {')
        lines.append(f'      "id": {segment.id},')
        lines.append('      "pts": [')
        point_count = len(segment.points)
        for point_index, point in enumerate(segment.points):
            comma = ',' if point_index + 1 < point_count else ''
            lines.append(f'        [{point.x:.{precision}f}, {point.y:.{precision}f}]{comma}')
        lines.append('      ]')
        comma = ',' if segment_index + 1 < segment_count else ''
        lines.append(f'    }}{comma}')
    lines.append('  ]')
    lines.append('}')
    return '\n'.join(lines) + '\n'


def write_city_map(path: PathLike, city_map: CityMap, precision: int = 6) -> None:
    """
    Write a map file.

    Raises:
        MapIOError: File could not be written
    """
    text = dumps_city_map(city_map, precision)
    try:
        with open(path, 'w', encoding='utf-8', newline='\n') as f:
            f.write(text)
    except OSError as e:
        raise MapIOError(f"cannot write map file {path}: {e}") from e
