"""
Sitemap Parser - Reads URL records back out of a generated sitemap document.

A sitemap document is Markdown. Only its machine-readable section is parsed:

    ## Machine-Readable URL List
    ### Depth 0
    - ✅ https://docs.example.com/
    ### Depth 1
    - ✅ https://docs.example.com/guide
    - 🔒 https://docs.example.com/admin
    ### Files (not extracted recursively)
    - 📄 https://docs.example.com/manual.pdf
    ## Notes
    ...

Each list item starts with a status glyph. Only accessible pages (✅) and
files (📄) become entries; blocked (🔒), error (❌) and warning (⚠️) items are
dropped. Parsing stops at the first level-2 heading after the section starts.

States:
    OUTSIDE -> IN_SECTION -> AT_DEPTH / AT_FILES -> FINISHED
"""

import re
from dataclasses import dataclass, asdict
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

import structlog


logger = structlog.get_logger(__name__)

MACHINE_READABLE_MARKER = "Machine-Readable"
FILES_MARKERS: Tuple[str, ...] = ("Files (not extracted recursively)", "### Files")
FILES_DEPTH = "files"

_SECTION_HEADING = re.compile(r"^##\s+")
_DEPTH_HEADING = re.compile(r"^###\s+Depth\s+(\d+)", re.ASCII)
_ENTRY_LINE = re.compile(r"^-\s+(✅|❌|🔒|⚠️?|📄)\s+(https?://[^\s)]+)")


class SitemapStatus(Enum):
    """Status glyphs used in sitemap list items"""
    ACCESSIBLE = "✅"
    ERROR = "❌"
    BLOCKED = "🔒"
    WARNING = "⚠️"
    FILE = "📄"

    @classmethod
    def from_glyph(cls, glyph: str) -> "SitemapStatus":
        # The warning sign appears with and without its emoji variation selector
        if glyph.startswith("⚠"):
            return cls.WARNING
        return cls(glyph)


class ParserState(Enum):
    """Sitemap parser states"""
    OUTSIDE = "outside"
    IN_SECTION = "in_section"
    AT_DEPTH = "at_depth"
    AT_FILES = "at_files"
    FINISHED = "finished"


class LineKind(Enum):
    """Classification of a single document line"""
    SECTION_MARKER = "section_marker"
    HEADING = "heading"
    DEPTH = "depth"
    FILES = "files"
    ENTRY = "entry"
    OTHER = "other"


_SECTION_STATES = (ParserState.IN_SECTION, ParserState.AT_DEPTH, ParserState.AT_FILES)

# (state, line kind) -> next state. Pairs not listed keep the current state.
TRANSITIONS: Dict[Tuple[ParserState, LineKind], ParserState] = {
    (ParserState.OUTSIDE, LineKind.SECTION_MARKER): ParserState.IN_SECTION,
}
for _state in _SECTION_STATES:
    TRANSITIONS[(_state, LineKind.HEADING)] = ParserState.FINISHED
    TRANSITIONS[(_state, LineKind.DEPTH)] = ParserState.AT_DEPTH
    TRANSITIONS[(_state, LineKind.FILES)] = ParserState.AT_FILES


@dataclass
class SitemapEntry:
    """A URL record recovered from a sitemap document"""
    url: str
    depth: Union[int, str, None]
    kind: str  # 'page' or 'file'
    status: str  # 'accessible' or 'file'

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def classify_line(line: str) -> Tuple[LineKind, Optional["re.Match[str]"]]:
    """
    Classify one line of a sitemap document.

    Returns:
        (LineKind, regex match for DEPTH and ENTRY lines, else None)
    """
    if MACHINE_READABLE_MARKER in line:
        return LineKind.SECTION_MARKER, None
    if _SECTION_HEADING.match(line):
        return LineKind.HEADING, None

    match = _DEPTH_HEADING.match(line)
    if match:
        return LineKind.DEPTH, match

    if any(marker in line for marker in FILES_MARKERS):
        return LineKind.FILES, None

    match = _ENTRY_LINE.match(line)
    if match:
        return LineKind.ENTRY, match

    return LineKind.OTHER, None


class SitemapParser:
    """
    Line-driven state machine over a sitemap document.

    Example:
        >>> parser = SitemapParser()
        >>> entries = parser.parse(document_text)
    """

    def __init__(self):
        self.state = ParserState.OUTSIDE
        self.current_depth: Union[int, str, None] = None
        self.entries: List[SitemapEntry] = []
        self.skipped = 0

    def reset(self):
        """Return to the initial state"""
        self.state = ParserState.OUTSIDE
        self.current_depth = None
        self.entries = []
        self.skipped = 0

    def feed(self, line: str) -> Optional[SitemapEntry]:
        """
        Process one line.

        Args:
            line: A single document line (without the newline)

        Returns:
            The SitemapEntry the line produced, if any
        """
        if self.state is ParserState.FINISHED:
            return None

        kind, match = classify_line(line)
        next_state = TRANSITIONS.get((self.state, kind), self.state)
        in_section = self.state in _SECTION_STATES
        self.state = next_state

        if not in_section:
            return None

        if kind is LineKind.DEPTH:
            self.current_depth = int(match.group(1))
        elif kind is LineKind.FILES:
            self.current_depth = FILES_DEPTH
        elif kind is LineKind.ENTRY:
            return self._emit(match)

        return None

    def parse(self, text: str) -> List[SitemapEntry]:
        """
        Parse a complete sitemap document.

        Args:
            text: Document text

        Returns:
            Entries in document order (empty if there is no machine-readable section)
        """
        self.reset()
        self.parse_lines(text.split("\n"))
        return self.entries

    def parse_lines(self, lines: Iterable[str]) -> List[SitemapEntry]:
        """Feed lines until the section ends or input runs out"""
        for line in lines:
            self.feed(line)
            if self.state is ParserState.FINISHED:
                break

        logger.debug(
            "sitemap_parsed",
            entries=len(self.entries),
            skipped=self.skipped,
            state=self.state.value,
        )
        return self.entries

    def _emit(self, match: "re.Match[str]") -> Optional[SitemapEntry]:
        status = SitemapStatus.from_glyph(match.group(1))
        url = match.group(2)

        if status is SitemapStatus.ACCESSIBLE:
            entry = SitemapEntry(url=url, depth=self.current_depth, kind="page", status="accessible")
        elif status is SitemapStatus.FILE:
            entry = SitemapEntry(url=url, depth=self.current_depth, kind="file", status="file")
        else:
            self.skipped += 1
            return None

        self.entries.append(entry)
        return entry


def parse_sitemap(text: str) -> List[SitemapEntry]:
    """Parse the machine-readable section of a sitemap document"""
    return SitemapParser().parse(text)


def parse_sitemap_file(path: Union[str, Path]) -> List[SitemapEntry]:
    """
    Parse a sitemap document from disk.

    Args:
        path: Path to the sitemap Markdown file

    Returns:
        List of SitemapEntry
    """
    with open(path, "r", encoding="utf-8") as f:
        return parse_sitemap(f.read())
