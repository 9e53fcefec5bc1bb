"""
Shared state machine for hierarchical auto-numbering.

Headings and numbered entities (equations, figures) are walked together in
line order. Each heading updates one counter per depth; each entity takes
the next tag under the current heading path.

Tags have the form `global_prefix + path + delimiter + n`, where `path` is
the first `max_depth - 1` heading counters. When the displayed path does not
change (headings deeper than the cap), `n` keeps counting instead of
restarting. Entities before the first heading are numbered
`global_prefix + no_heading_prefix + n`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple, TypeVar, Union

from ..parsers.heading_parser import Heading, relative_heading_levels


class AutoNumberingType(Enum):
    RELATIVE = "relative"     # depth follows heading nesting as encountered
    ABSOLUTE = "absolute"     # depth follows raw Markdown heading level

    @classmethod
    def coerce(cls, value: Union["AutoNumberingType", str]) -> "AutoNumberingType":
        """Accept an enum member or its (case-insensitive) name/value."""
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        for member in cls:
            if text in (member.value, member.name.lower()):
                return member
        raise ValueError(f"Unknown auto numbering type: {value!r}")


@dataclass
class NumberingOptions:
    auto_numbering_type: AutoNumberingType = AutoNumberingType.RELATIVE
    max_depth: int = 3
    delimiter: str = "."
    no_heading_prefix: str = "P"
    global_prefix: str = ""
    parse_quotes: bool = False

    def __post_init__(self):
        self.auto_numbering_type = AutoNumberingType.coerce(self.auto_numbering_type)
        self.global_prefix = self.global_prefix or ""
        self.no_heading_prefix = self.no_heading_prefix or ""

    @property
    def path_capacity(self) -> int:
        """Number of heading counters shown in a tag (max_depth 0 acts as 1)."""
        return max(self.max_depth or 0, 1) - 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "auto_numbering_type": self.auto_numbering_type.value,
            "max_depth": self.max_depth,
            "delimiter": self.delimiter,
            "no_heading_prefix": self.no_heading_prefix,
            "global_prefix": self.global_prefix,
            "parse_quotes": self.parse_quotes,
        }


class TagCounter:
    """Counter state for one numbering pass."""

    def __init__(self, options: NumberingOptions):
        self.options = options
        self._levels: List[int] = []
        self._seen_heading = False
        self._path: Optional[Tuple[int, ...]] = None
        self._count = 0
        self._no_heading_count = 0

    def enter_heading(self, depth: int) -> None:
        """
        Open a heading at `depth` (relative depth or raw level, by mode).

        Counters deeper than `depth` are dropped; missing shallower counters
        (a `###` right under `#`) start at 1.
        """
        depth = max(depth, 1)
        self._seen_heading = True
        del self._levels[depth:]
        while len(self._levels) < depth:
            self._levels.append(0)
        for i in range(depth - 1):
            if self._levels[i] == 0:
                self._levels[i] = 1
        self._levels[depth - 1] += 1

    def next_tag(self) -> str:
        opts = self.options
        if not self._seen_heading:
            self._no_heading_count += 1
            return f"{opts.global_prefix}{opts.no_heading_prefix}{self._no_heading_count}"

        path = tuple(self._levels[:opts.path_capacity])
        if path != self._path:
            self._path = path
            self._count = 0
        self._count += 1
        parts = [str(n) for n in path] + [str(self._count)]
        return opts.global_prefix + opts.delimiter.join(parts)


@dataclass
class NumberingResult:
    md: str
    tag_mapping: Dict[str, str] = field(default_factory=dict)   # old tag -> new tag
    numbered: int = 0                                           # entities tagged in this pass

    def to_dict(self) -> Dict[str, Any]:
        return {"tag_mapping": dict(self.tag_mapping), "numbered": self.numbered}


E = TypeVar("E")


def heading_depths(headings: Sequence[Heading], mode: AutoNumberingType) -> List[int]:
    if mode is AutoNumberingType.RELATIVE:
        return relative_heading_levels(headings)
    return [h.level for h in headings]


def walk_in_order(
    headings: Sequence[Heading],
    entities: Sequence[E],
    options: NumberingOptions,
) -> Iterator[Tuple[E, TagCounter]]:
    """
    Yield each entity with the counter positioned at it.

    Entities must expose `line_start`; headings are applied to the counter
    before any entity that follows them.
    """
    counter = TagCounter(options)
    depths = heading_depths(headings, options.auto_numbering_type)
    h = 0
    for entity in sorted(entities, key=lambda e: e.line_start):
        while h < len(headings) and headings[h].line < entity.line_start:
            counter.enter_heading(depths[h])
            h += 1
        yield entity, counter


def record_mapping(mapping: Dict[str, str], old_tag: Optional[str], new_tag: str) -> None:
    """Keep the first old -> new pair per old tag."""
    if old_tag:
        mapping.setdefault(old_tag, new_tag)
