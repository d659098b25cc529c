"""Dotted-path extraction over decoded JSON.

Model catalogs come in many shapes: ``{"data": [{"id": ...}]}``,
``{"models": [{"name": ...}]}``, ``{"modelSummaries": [{"modelId": ...}]}``
or a bare array. One path string describes each of them: every segment but
the last walks into nested objects, and the last names the field read from
each element of the array found there.
"""

from typing import Any, TypeAlias

from ..errors import JsonPathError

JsonValue: TypeAlias = dict[str, Any] | list[Any] | str | int | float | bool | None


def split_path(path: str) -> list[str]:
    segments = path.split(".")
    for position, segment in enumerate(segments):
        if not segment:
            raise JsonPathError(f"empty path part at {position}", segment, position)
    return segments


def walk(value: JsonValue, segments: list[str], position: int = 0) -> JsonValue:
    """Descend through nested objects one segment at a time.

    Raises:
        JsonPathError: If a step lands on a non-object or a missing key
    """
    if not segments:
        return value
    head, *rest = segments
    if not isinstance(value, dict):
        raise JsonPathError(f"expected object at part {position}", head, position)
    if head not in value:
        raise JsonPathError(f"path part {head} not found", head, position)
    return walk(value[head], rest, position + 1)


def collect(value: JsonValue, field: str) -> list[str]:
    """Read ``field`` from every object in ``value``.

    Non-arrays yield nothing. Elements that are not objects, or whose field
    is missing or not a string, are skipped.
    """
    if not isinstance(value, list):
        return []
    return [
        item[field]
        for item in value
        if isinstance(item, dict) and isinstance(item.get(field), str)
    ]


def extract_field(document: JsonValue, path: str) -> list[str]:
    """Flatten the field named by ``path`` out of an array of records.

    Args:
        document: Decoded JSON value
        path: Dotted path such as ``"data.id"``

    Returns:
        Collected strings in document order; ``[]`` for an empty array

    Raises:
        JsonPathError: If the object walk fails
    """
    segments = split_path(path)
    container = walk(document, segments[:-1])
    return collect(container, segments[-1])
