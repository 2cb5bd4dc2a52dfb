"""
Path string parsing.

Two syntaxes are supported:

    bracket (default): "foo.bar[key.with.dots].fizz[buzz]"
        -> ["foo", "bar", "key.with.dots", "fizz", "buzz"]
    dot: "foo.bar.0" -> ["foo", "bar", "0"]

Tokenizing is a pure function of its input.
"""

import re

from .errors import PathSyntaxError

BRACKET = "bracket"
DOT = "dot"

_TOKEN_PATTERN = re.compile(r"\w+|\[[^\]]+\]")


def _split_bracket(path: str) -> list[str]:
    segments = []
    for token in _TOKEN_PATTERN.findall(path):
        if token.startswith("["):
            token = token[1:-1]
        segments.append(token)
    return segments


def _split_dot(path: str) -> list[str]:
    segments = path.split(".")
    if any(segment == "" for segment in segments):
        raise PathSyntaxError(path, "empty segment")
    return segments


def path_split(path: str, syntax: str = BRACKET) -> list[str]:
    """
    Convert a string path into a list of keys.

    Args:
        path: Path string (e.g., "lanes[0].name" or "lanes.0.name")
        syntax: "bracket" (words and [bracketed] keys) or "dot"

    Returns:
        Ordered list of key segments

    Raises:
        PathSyntaxError: If the path has no segments or the syntax is unknown
    """
    if not isinstance(path, str):
        raise PathSyntaxError(str(path), "path must be a string")

    if syntax == BRACKET:
        segments = _split_bracket(path)
    elif syntax == DOT:
        segments = _split_dot(path) if path else []
    else:
        raise PathSyntaxError(path, f"unknown path syntax {syntax!r}")

    if not segments:
        raise PathSyntaxError(path)
    return segments
