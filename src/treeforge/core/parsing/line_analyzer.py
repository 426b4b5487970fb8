from __future__ import annotations

"""
Structure Line Analyzer.

Extracts nesting units, name, kind and inline comment from a single line of
a pasted directory structure. Two strategies compete per line: tree glyphs
(connector preceded by continuation glyphs) take priority, plain leading
indentation is the fallback.

Depth rule shared by both strategies: one indentation unit is one nesting
level. A vertical glyph plus up to three padding blanks is one unit, a tab
is one unit, other blank runs inside a glyph prefix count ceil(len / 4)
units, and plain indentation counts two columns per unit.
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

from treeforge.domain import constants as const
from treeforge.domain.node_models import NodeKind

STRATEGY_GLYPH = "glyph"
STRATEGY_INDENT = "indent"

_UNICODE_CONNECTORS = frozenset({"├", "└", "┣", "┗"})

# -----------------------------------------------------------------------------
# DATA MODEL
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class LineInfo:
    """
    Analysis of one structural line.

    Attributes:
        units: Indentation units preceding the entry (before the connector).
        strategy: Strategy that produced the units (glyph or indent).
        segments: Name split on interior separators, never empty.
        kind: Inferred kind of the last segment.
        comment: Inline comment text, if any.
    """
    units: int
    strategy: str
    segments: Tuple[str, ...]
    kind: NodeKind
    comment: Optional[str] = None

    @property
    def name(self) -> str:
        return "/".join(self.segments)

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def analyze_line(line: str) -> Optional[LineInfo]:
    """
    Analyze a single line of structure text.

    Args:
        line: Raw line without its newline terminator.

    Returns:
        Optional[LineInfo]: The analysis, or None for decoration-only lines
                            (glyphs, whitespace or a bare comment).
    """
    connector = find_connector(line)
    if connector is not None:
        start, end = connector
        units = count_prefix_units(line[:start])
        strategy = STRATEGY_GLYPH
        rest = line[end:]
    else:
        prefix_len = _leading_prefix_length(line)
        prefix = line[:prefix_len]
        rest = line[prefix_len:]
        if any(ch in const.VERTICAL_GLYPHS for ch in prefix):
            units = count_prefix_units(prefix)
        else:
            units = count_indent_units(prefix)
        strategy = STRATEGY_INDENT

    raw_name, comment = split_comment(rest)
    name, kind = classify_name(raw_name)
    segments = split_segments(name)
    if not segments:
        return None

    return LineInfo(
        units=units,
        strategy=strategy,
        segments=segments,
        kind=kind,
        comment=comment,
    )


def find_connector(line: str) -> Optional[Tuple[int, int]]:
    """
    Locate a connector glyph inside the leading prefix of a line.

    Only whitespace and vertical continuation glyphs may precede the
    connector. Unicode connectors may stand alone; ASCII connectors
    ('|--', '+--', '`--') need at least two trailing dashes.

    Returns:
        Optional[Tuple[int, int]]: (connector start, index after the dashes).
    """
    for i, ch in enumerate(line):
        if ch in const.CONNECTOR_GLYPHS or ch == "|":
            j = i + 1
            while j < len(line) and line[j] in const.DASH_GLYPHS:
                j += 1
            dashes = j - i - 1
            if ch in _UNICODE_CONNECTORS or dashes >= 2:
                return i, j
        if ch in const.VERTICAL_GLYPHS or ch.isspace():
            continue
        return None
    return None


def count_prefix_units(prefix: str) -> int:
    """Count indentation units in a glyph prefix."""
    units = 0
    blank_run = 0
    padding = 0

    for ch in prefix:
        if ch in const.VERTICAL_GLYPHS:
            units += _blank_units(blank_run) + 1
            blank_run = 0
            padding = 3
        elif ch == "\t":
            units += _blank_units(blank_run) + 1
            blank_run = 0
            padding = 0
        elif ch.isspace():
            if padding:
                padding -= 1
            else:
                blank_run += 1

    return units + _blank_units(blank_run)


def count_indent_units(prefix: str) -> int:
    """Count indentation units in plain leading whitespace."""
    columns = 0
    for ch in prefix:
        columns += const.INDENT_WIDTH if ch == "\t" else 1
    return columns // const.INDENT_WIDTH


def split_comment(text: str) -> Tuple[str, Optional[str]]:
    """
    Split off an inline comment at the first comment marker.

    Returns:
        Tuple[str, Optional[str]]: (Text before the marker, trimmed comment or None).
    """
    head, marker, tail = text.partition(const.COMMENT_MARKER)
    if not marker:
        return text, None
    comment = tail.strip()
    return head, comment or None


def classify_name(raw: str) -> Tuple[str, NodeKind]:
    """
    Strip kind markers from a name and infer its kind.

    A trailing '/' marks a directory, a '**' suffix marks a file and wins
    over the slash. Otherwise a '.' in the last segment means file and
    anything else defaults to directory.

    Returns:
        Tuple[str, NodeKind]: (Cleaned name, inferred kind).
    """
    name = raw.strip()
    had_slash = name.endswith(const.DIRECTORY_MARKER)
    name = name.rstrip(const.DIRECTORY_MARKER).strip()

    if name.endswith(const.FILE_MARKER):
        return name[: -len(const.FILE_MARKER)].strip(), NodeKind.FILE
    if had_slash:
        return name, NodeKind.DIRECTORY

    last = name.rsplit(const.DIRECTORY_MARKER, 1)[-1]
    if "." in last:
        return name, NodeKind.FILE
    return name, NodeKind.DIRECTORY


def split_segments(name: str) -> Tuple[str, ...]:
    """
    Split a name on interior separators.

    Empty and '.' segments are dropped, unless '.' is the whole name.
    """
    parts: List[str] = [p.strip() for p in name.split(const.DIRECTORY_MARKER)]
    segments = [p for p in parts if p and p != "."]
    if not segments and name.strip() == ".":
        return (".",)
    return tuple(segments)

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _blank_units(blank_run: int) -> int:
    if blank_run <= 0:
        return 0
    return math.ceil(blank_run / const.GLYPH_UNIT_WIDTH)


def _leading_prefix_length(line: str) -> int:
    """Length of the leading run of whitespace and vertical glyphs."""
    i = 0
    while i < len(line):
        ch = line[i]
        if ch.isspace():
            i += 1
            continue
        if ch in const.VERTICAL_GLYPHS:
            # An ASCII bar directly followed by text belongs to the name
            if ch == "|" and i + 1 < len(line) and not line[i + 1].isspace():
                break
            i += 1
            continue
        break
    return i
