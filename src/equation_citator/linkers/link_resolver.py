"""Queries over a precomputed note link graph `{source: {target: count}}`."""

from typing import Any, List, Mapping, Optional


def resolve_forward_links(resolved_links: Optional[Mapping[str, Any]], source: Optional[str]) -> List[str]:
    """Targets linked from `source`; zero link counts still count."""
    if not resolved_links or not source:
        return []
    targets = resolved_links.get(source)
    if not isinstance(targets, Mapping):
        return []
    return list(targets.keys())


def resolve_back_links(resolved_links: Optional[Mapping[str, Any]], target: Optional[str]) -> List[str]:
    """Sources whose outgoing links include `target`, in graph order."""
    if not resolved_links or not target:
        return []
    return [
        source
        for source, targets in resolved_links.items()
        if isinstance(targets, Mapping) and target in targets
    ]
