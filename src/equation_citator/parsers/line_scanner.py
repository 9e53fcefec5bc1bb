"""
Per-line scan state shared by the document parsers.

Each parser folds `advance()` over the document lines, so code-fence and
blockquote tracking lives in one place and can be tested line by line.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterator, List

from ..utils.regex_utils import is_code_block_toggle
from ..utils.string_utils import process_quote_line


@dataclass(frozen=True)
class ScanState:
    """State carried from one line to the next."""
    in_code_block: bool = False


@dataclass
class ScannedLine:
    """One document line with its scan context."""
    index: int                # 0-based line number
    raw: str                  # the line as written
    content: str              # quote markers stripped, trimmed
    quote_depth: int
    is_fence: bool            # the line toggles code-block state
    in_code_block: bool       # inside a fenced block (fence lines included)

    @property
    def in_quote(self) -> bool:
        return self.quote_depth > 0

    @property
    def is_code(self) -> bool:
        return self.in_code_block or self.is_fence


def advance(state: ScanState, index: int, raw: str) -> tuple:
    """Consume one line; return (new_state, ScannedLine)."""
    quote = process_quote_line(raw)
    fence = is_code_block_toggle(raw)
    scanned = ScannedLine(
        index=index,
        raw=raw,
        content=quote.content,
        quote_depth=quote.quote_depth,
        is_fence=fence,
        in_code_block=state.in_code_block,
    )
    if fence:
        state = replace(state, in_code_block=not state.in_code_block)
    return state, scanned


def scan_lines(markdown: str) -> Iterator[ScannedLine]:
    """Yield every line of `markdown` with code-block and quote context."""
    state = ScanState()
    for index, raw in enumerate(split_lines(markdown)):
        state, scanned = advance(state, index, raw)
        yield scanned


def split_lines(markdown: str) -> List[str]:
    """Split on `\\n`, keeping a trailing empty line so offsets round-trip."""
    if not markdown:
        return []
    return markdown.split("\n")
