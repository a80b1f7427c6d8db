"""
hkanno.lines - Line classification for hkanno text.

One classifier shared by the parser, the correlator and the cursor sync so
the three always agree on what a header or an annotation line is.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Union

from hkanno.model import decode_nullable

TRACK_NAME_PATTERN = re.compile(r"^\s*trackName\s*:(.*)$", re.IGNORECASE)
TIME_TOKEN_PATTERN = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")


@dataclass(frozen=True)
class BlankLine:
    pass


@dataclass(frozen=True)
class CommentLine:
    body: str


@dataclass(frozen=True)
class HeaderLine:
    name: str | None


@dataclass(frozen=True)
class AnnotationLine:
    """``<time> <text>`` line.

    ``time`` is nan when ``time_token`` is not a finite number; check
    ``time_valid`` rather than comparing the float.
    """

    time: float
    text: str | None
    time_token: str
    time_valid: bool


Line = Union[BlankLine, CommentLine, HeaderLine, AnnotationLine]


def split_lines(text: str) -> list[str]:
    """Split document text on LF or CRLF line breaks."""
    return re.split(r"\r?\n", text)


def parse_time(token: str) -> float | None:
    """Parse an annotation time token.

    The whole token must be a plain decimal number, optionally signed and
    with an exponent (`0.5`, `.5`, `2`, `1e-3`). Anything else is malformed:
    trailing units (`1.5s`), digit separators (`1_000`), `nan` and `inf`.
    Malformed times become nan under the lenient policy and an error under
    the strict one.

    Returns:
        The time in seconds, or None if the token is malformed
    """
    if not TIME_TOKEN_PATTERN.match(token):
        return None
    value = float(token)
    if not math.isfinite(value):
        return None
    return value


def classify_line(line: str) -> Line:
    """Classify one line of hkanno text.

    Precedence: blank, header, comment, annotation.

    Args:
        line: Raw line (without line break)

    Returns:
        Tagged line variant
    """
    trimmed = line.strip()
    if not trimmed:
        return BlankLine()

    header = TRACK_NAME_PATTERN.match(trimmed)
    if header:
        return HeaderLine(name=decode_nullable(header.group(1)))

    if trimmed.startswith("#"):
        return CommentLine(body=trimmed[1:].strip())

    # tab or space; runs after the time collapse once the tail is trimmed
    token, *rest = re.split(r"\s", trimmed)
    time = parse_time(token)
    return AnnotationLine(
        time=time if time is not None else math.nan,
        text=decode_nullable(" ".join(rest)),
        time_token=token,
        time_valid=time is not None,
    )


def is_header(line: Line) -> bool:
    return isinstance(line, HeaderLine)


def is_time_bearing(line: Line) -> bool:
    # every annotation line is one annotation in the model, valid time or not
    return isinstance(line, AnnotationLine)
