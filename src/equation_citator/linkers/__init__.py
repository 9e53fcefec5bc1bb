# Citation tag algebra, rendering and link graph lookups
from .citation_tags import (
    FileCitation,
    split_file_citation,
    combine_continuous_citation_tags,
    split_continuous_citation_tags,
)
from .citation_renderer import (
    generate_citation_spans,
    replace_citations_in_markdown_with_span,
    update_citations_in_markdown,
)
from .link_resolver import resolve_back_links, resolve_forward_links

__all__ = [
    "FileCitation",
    "split_file_citation",
    "combine_continuous_citation_tags",
    "split_continuous_citation_tags",
    "generate_citation_spans",
    "replace_citations_in_markdown_with_span",
    "update_citations_in_markdown",
    "resolve_back_links",
    "resolve_forward_links",
]
