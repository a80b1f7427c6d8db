"""
hkanno.correlate - Line correlation between hkanno text and XML preview.

Pairs lines by order of appearance, not by content: the k-th `trackName:`
line of the text maps to the k-th `<hkparam name="trackName">` line of the
XML, and the k-th annotation line to the k-th `<hkparam name="time">` line.
Both texts derive from the same model, so the k-th occurrence is the same
logical element on both sides as long as their structure agrees.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Literal

from hkanno.lines import classify_line, is_header, is_time_bearing, split_lines
from hkanno.logging import logger

XML_TRACK_NAME_PATTERN = re.compile(r'<hkparam\s+name="trackName"\s*>')
XML_TIME_PATTERN = re.compile(r'<hkparam\s+name="time"\s*>')

HEADER = "H"
TIME = "T"

LineKind = Literal["H", "T"]
AlignmentStatus = Literal["aligned", "truncated", "diverged"]


@dataclass
class LineMaps:
    """Line-number maps (1-based) from the hkanno text to the XML.

    Each map carries its own alignment status; a category that diverged in
    strict mode is left empty while the other one is still usable.
    """

    track_map: dict[int, int] = field(default_factory=dict)
    time_map: dict[int, int] = field(default_factory=dict)
    track_status: AlignmentStatus = "aligned"
    time_status: AlignmentStatus = "aligned"

    @property
    def status(self) -> AlignmentStatus:
        """Worst status of the two categories."""
        statuses = {self.track_status, self.time_status}
        for status in ("diverged", "truncated"):
            if status in statuses:
                return status
        return "aligned"

    def lookup(self, kind: LineKind, line_number: int) -> int | None:
        if kind == HEADER:
            return self.track_map.get(line_number)
        return self.time_map.get(line_number)

    def __bool__(self) -> bool:
        return bool(self.track_map or self.time_map)


def scan_primary(text: str) -> list[tuple[LineKind, int]]:
    """Collect header and annotation lines of hkanno text in order."""
    found: list[tuple[LineKind, int]] = []
    for i, raw in enumerate(split_lines(text), 1):
        line = classify_line(raw)
        if is_header(line):
            found.append((HEADER, i))
        elif is_time_bearing(line):
            found.append((TIME, i))
    return found


def scan_secondary(xml: str) -> list[tuple[LineKind, int]]:
    """Collect trackName and time hkparam lines of the XML in order."""
    found: list[tuple[LineKind, int]] = []
    for i, line in enumerate(split_lines(xml), 1):
        if XML_TRACK_NAME_PATTERN.search(line):
            found.append((HEADER, i))
        elif XML_TIME_PATTERN.search(line):
            found.append((TIME, i))
    return found


def lines_of(found: list[tuple[LineKind, int]], kind: LineKind) -> list[int]:
    return [i for k, i in found if k == kind]


def time_groups(found: list[tuple[LineKind, int]]) -> list[int]:
    """Number of time lines under each track, in order.

    Time lines before the first header form their own group, which is how
    the preview renders them (under an unnamed track). An empty leading
    group is dropped so both sides line up on their first track.
    """
    groups = [0]
    for kind, _ in found:
        if kind == HEADER:
            groups.append(0)
        else:
            groups[-1] += 1
    if groups[0] == 0 and len(groups) > 1:
        groups.pop(0)
    return groups


def classify_count(left: int, right: int) -> AlignmentStatus:
    """Header lines only pair in order, so any count difference is a truncation."""
    return "aligned" if left == right else "truncated"


def _is_prefix(short: list[int], long: list[int]) -> bool:
    if not short or len(short) > len(long):
        return False
    k = len(short) - 1
    return short[:k] == long[:k] and short[k] <= long[k]


def classify_groups(left: list[int], right: list[int]) -> AlignmentStatus:
    """Compare per-track time counts of both sides.

    Returns:
        "aligned" if identical, "truncated" if one side stops early inside
        the other's layout, "diverged" otherwise
    """
    if left == right:
        return "aligned"
    if _is_prefix(left, right) or _is_prefix(right, left):
        return "truncated"
    return "diverged"


def pair_by_index(left: list[int], right: list[int]) -> dict[int, int]:
    """Pair the k-th entry of each list; surplus entries are left unmapped."""
    return dict(zip(left, right))


def build_line_maps(primary_text: str, secondary_text: str, strict: bool = True) -> LineMaps:
    """Build index-based line maps between hkanno text and its XML preview.

    Args:
        primary_text: Editable hkanno text
        secondary_text: XML produced from the same document
        strict: If True, leave the time map empty when the per-track time
            counts diverge instead of pairing mismatched elements

    Returns:
        LineMaps with track and time maps
    """
    primary = scan_primary(primary_text)
    secondary = scan_secondary(secondary_text)

    primary_headers = lines_of(primary, HEADER)
    secondary_headers = lines_of(secondary, HEADER)
    track_status = classify_count(len(primary_headers), len(secondary_headers))
    track_map = pair_by_index(primary_headers, secondary_headers)

    time_status = classify_groups(time_groups(primary), time_groups(secondary))
    if time_status == "diverged" and strict:
        logger.warning(
            "Annotations per track differ between text and preview (%s vs %s); "
            "time line sync disabled",
            time_groups(primary),
            time_groups(secondary),
        )
        time_map: dict[int, int] = {}
    else:
        time_map = pair_by_index(lines_of(primary, TIME), lines_of(secondary, TIME))

    logger.debug(
        "Built line maps: %d track lines (%s), %d time lines (%s)",
        len(track_map),
        track_status,
        len(time_map),
        time_status,
    )
    return LineMaps(
        track_map=track_map,
        time_map=time_map,
        track_status=track_status,
        time_status=time_status,
    )
