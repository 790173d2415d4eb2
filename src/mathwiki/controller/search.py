"""
Search Index & Engine
=====================
Scores free-text queries against normalized page titles, aliases and tags.

Scoring is additive across the three categories and exclusive within each
one (only the best match of a category counts):

    title   prefix 120, else substring 80
    alias   prefix  70, else substring 40
    tag     prefix  30, else substring 15

Pages scoring 0 are dropped. An empty query scores every page 1, so it
returns the tag-filtered set instead of nothing.
"""
from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from mathwiki import config
from mathwiki.model.content import Page, SearchIndexEntry
from mathwiki.utils import normalize_search_key, title_sort_key

TITLE_PREFIX_SCORE = 120
TITLE_SUBSTRING_SCORE = 80
ALIAS_PREFIX_SCORE = 70
ALIAS_SUBSTRING_SCORE = 40
TAG_PREFIX_SCORE = 30
TAG_SUBSTRING_SCORE = 15


def build_index(pages: Iterable[Page]) -> tuple[SearchIndexEntry, ...]:
    """One entry per page, in the order given."""
    return tuple(
        SearchIndexEntry(
            page_id=page.id,
            title_normalized=normalize_search_key(page.title),
            aliases_normalized=tuple(normalize_search_key(a) for a in page.aliases),
            tags_normalized=tuple(normalize_search_key(t) for t in page.tags),
        )
        for page in pages
    )


def _category_score(values: Sequence[str], query: str, prefix_score: int, substring_score: int) -> int:
    if any(v.startswith(query) for v in values):
        return prefix_score
    if any(query in v for v in values):
        return substring_score
    return 0


def compute_score(entry: SearchIndexEntry, query: str) -> int:
    """Score `entry` against an already normalized, non-empty query."""
    return (
        _category_score((entry.title_normalized,), query, TITLE_PREFIX_SCORE, TITLE_SUBSTRING_SCORE)
        + _category_score(entry.aliases_normalized, query, ALIAS_PREFIX_SCORE, ALIAS_SUBSTRING_SCORE)
        + _category_score(entry.tags_normalized, query, TAG_PREFIX_SCORE, TAG_SUBSTRING_SCORE)
    )


class SearchEngine:
    """
    Ranks pages for a query and an optional tag filter.

    search() is pure: the same (index, query, tags, limit) always gives the
    same result.
    """

    def __init__(self, pages: Iterable[Page]) -> None:
        self.pages = list(pages)
        self.page_by_id = {p.id: p for p in self.pages}
        self.index = build_index(self.pages)

    def search(
        self,
        query: str,
        tags: Optional[Iterable[str]] = None,
        limit: int = config.DEFAULT_SEARCH_LIMIT,
    ) -> List[Page]:
        normalized_query = normalize_search_key(query)
        normalized_tags = {normalize_search_key(t) for t in tags or ()}

        scored: list[tuple[Page, int]] = []
        for entry in self.index:
            page = self.page_by_id.get(entry.page_id)
            if page is None:
                continue

            if normalized_tags and normalized_tags.isdisjoint(entry.tags_normalized):
                continue

            if not normalized_query:
                scored.append((page, 1))
                continue

            score = compute_score(entry, normalized_query)
            if score > 0:
                scored.append((page, score))

        scored.sort(key=lambda item: (-item[1], title_sort_key(item[0].title)))
        return [page for page, _ in scored[:max(limit, 0)]]
