"""
Content Store
=============
The single object the presentation layer talks to.

Why is this file needed?
------------------------
1. Composition: it owns the repository, the search engine and the link
   resolver, and rebuilds the latter two atomically whenever the corpus
   loads.
2. State: query, selected tags, search results, load status and browse
   history live here, each change announced through a Qt signal.
3. Caching: rendered (markup + links) text is cached per composite key and
   dropped in full on every load.

Views never touch the index or the link dictionary directly.
"""
from __future__ import annotations

import logging
from typing import Dict, Hashable, Iterable, List, Optional
from urllib.parse import unquote, urlsplit

from PySide6.QtCore import QObject, Signal

from mathwiki import config
from mathwiki.controller import markup
from mathwiki.controller.links import LinkResolver, segments_to_markdown
from mathwiki.controller.search import SearchEngine
from mathwiki.controller.workers import DebouncedSearch
from mathwiki.model.content import DerivationSpec, DerivationStep, LinkedSegment, Page, VisualSpec
from mathwiki.model.errors import ContentError
from mathwiki.model.repository import ContentRepository
from mathwiki.utils import title_sort_key

logger = logging.getLogger(__name__)

NavigationPath = tuple[str, ...]


class ContentStore(QObject):
    """Central state store with signals for view sync."""
    query_changed = Signal(str)
    tags_changed = Signal(object)
    search_results_changed = Signal(object)
    navigation_changed = Signal(object)
    load_state_changed = Signal()

    def __init__(
        self,
        repository: Optional[ContentRepository] = None,
        debounce_ms: int = config.SEARCH_DEBOUNCE_MS,
        autoload: bool = True,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self.repository = repository or ContentRepository()
        self.search_engine: Optional[SearchEngine] = None
        self.link_resolver: Optional[LinkResolver] = None

        self.available_tags: tuple[str, ...] = config.AVAILABLE_TAGS
        self.featured_page_ids: tuple[str, ...] = config.FEATURED_PAGE_IDS

        self._query = ""
        self._selected_tags: frozenset[str] = frozenset()
        self._search_results: List[Page] = []

        self.is_loading = False
        self.load_error_message: Optional[str] = None

        self._linked_text_cache: Dict[Hashable, tuple[LinkedSegment, ...]] = {}

        self._navigation_path: NavigationPath = ()
        self._path_snapshots: List[NavigationPath] = [()]
        self._snapshot_cursor = 0

        self._debounced_search = DebouncedSearch(self._compute_results, debounce_ms, parent=self)
        self._debounced_search.results_ready.connect(self._apply_results)

        if autoload:
            self.load()

    # ---- LOADING ----
    def load(self) -> None:
        """Load (or reload) the corpus. Also the retry entry point after a failure."""
        self.is_loading = True
        self.load_error_message = None
        self.load_state_changed.emit()

        try:
            self.repository.load()
            search_engine = SearchEngine(self.repository.pages)
            link_resolver = LinkResolver(self.repository.pages)
        except ContentError as e:
            logger.error(f"Failed to load content: {e}")
            self.search_engine = None
            self.link_resolver = None
            self.load_error_message = str(e)
        else:
            self.search_engine = search_engine
            self.link_resolver = link_resolver
        finally:
            self._linked_text_cache.clear()
            self.is_loading = False

        self.refresh_search()
        self.load_state_changed.emit()

    @property
    def has_loaded_content(self) -> bool:
        return self.load_error_message is None and self.search_engine is not None and bool(self.repository.pages)

    @property
    def pages(self) -> List[Page]:
        if self.load_error_message is not None:
            return []
        return self.repository.pages

    # ---- QUERY & TAGS ----
    @property
    def query(self) -> str:
        return self._query

    def set_query(self, query: str) -> None:
        if query == self._query:
            return
        self._query = query
        self.query_changed.emit(query)
        self._debounced_search.schedule(self._query, self._selected_tags)

    @property
    def selected_tags(self) -> frozenset[str]:
        return self._selected_tags

    def set_selected_tags(self, tags: Iterable[str]) -> None:
        tags = frozenset(tags)
        if tags == self._selected_tags:
            return
        self._selected_tags = tags
        self.tags_changed.emit(tags)
        self._debounced_search.schedule(self._query, self._selected_tags)

    def toggle_tag(self, tag: str) -> None:
        if tag in self._selected_tags:
            self.set_selected_tags(self._selected_tags - {tag})
        else:
            self.set_selected_tags(self._selected_tags | {tag})

    # ---- SEARCH ----
    @property
    def search_results(self) -> List[Page]:
        return list(self._search_results)

    @property
    def is_search_pending(self) -> bool:
        return self._debounced_search.is_pending

    def refresh_search(self) -> None:
        """Recompute now, superseding any debounced recomputation."""
        self._debounced_search.cancel()
        self._apply_results(self._compute_results(self._query, self._selected_tags))

    def _compute_results(self, query: str, tags: frozenset[str]) -> List[Page]:
        if self.search_engine is None:
            return []
        return self.search_engine.search(query, tags, limit=config.SEARCH_RESULT_LIMIT)

    def _apply_results(self, results: List[Page]) -> None:
        self._search_results = results
        self.search_results_changed.emit(list(results))

    def home_list_pages(self) -> List[Page]:
        """All (tag-filtered) pages for a blank query, otherwise the ranked results."""
        if not self._query.strip():
            pages = self.pages
            if self._selected_tags:
                pages = [p for p in pages if not self._selected_tags.isdisjoint(p.tags)]
            return sorted(pages, key=lambda p: title_sort_key(p.title))
        return self.search_results

    def autocomplete_pages(self) -> List[Page]:
        if not self._query.strip() or self.search_engine is None:
            return []
        return self.search_engine.search(self._query, self._selected_tags, limit=config.AUTOCOMPLETE_LIMIT)

    # ---- LOOKUPS ----
    # The repository keeps its last good corpus after a failed load; while the
    # store is in the error state none of it is served.
    def featured_pages(self) -> List[Page]:
        return [p for p in (self.page(i) for i in self.featured_page_ids) if p is not None]

    def page(self, page_id: str) -> Optional[Page]:
        if self.load_error_message is not None:
            return None
        return self.repository.page(page_id)

    def visual_for(self, page: Page) -> Optional[VisualSpec]:
        if self.load_error_message is not None:
            return None
        return self.repository.visual(page.visual_spec_id)

    def derivation_for(self, page: Page) -> Optional[DerivationSpec]:
        if self.load_error_message is not None or page.derivation_id is None:
            return None
        return self.repository.derivation(page.derivation_id)

    def related_pages(self, page: Page) -> List[Page]:
        return [p for p in (self.page(i) for i in page.related_page_ids) if p is not None]

    # ---- NAVIGATION HISTORY ----
    @property
    def navigation_path(self) -> NavigationPath:
        return self._navigation_path

    @property
    def history_snapshots(self) -> tuple[NavigationPath, ...]:
        return tuple(self._path_snapshots)

    @property
    def can_go_back(self) -> bool:
        return self._snapshot_cursor > 0

    @property
    def can_go_forward(self) -> bool:
        return self._snapshot_cursor < len(self._path_snapshots) - 1

    def open_page(self, page_id: str) -> None:
        if self.page(page_id) is None:
            logger.warning(f"Ignoring navigation to unavailable page '{page_id}'.")
            return
        self.set_navigation_path(self._navigation_path + (page_id,))

    def set_navigation_path(self, path: Iterable[str]) -> None:
        """Adopt a path chosen by the view (e.g. a pop) and record it in history."""
        path = tuple(path)
        self._navigation_path = path
        self._register_snapshot(path)
        self.navigation_changed.emit(path)

    def go_back(self) -> None:
        if not self.can_go_back:
            return
        self._snapshot_cursor -= 1
        self._apply_snapshot(self._snapshot_cursor)

    def go_forward(self) -> None:
        if not self.can_go_forward:
            return
        self._snapshot_cursor += 1
        self._apply_snapshot(self._snapshot_cursor)

    def _register_snapshot(self, path: NavigationPath) -> None:
        if self._path_snapshots[self._snapshot_cursor] == path:
            return
        # A new branch discards the forward history
        del self._path_snapshots[self._snapshot_cursor + 1:]
        self._path_snapshots.append(path)
        self._snapshot_cursor += 1

    def _apply_snapshot(self, index: int) -> None:
        self._navigation_path = self._path_snapshots[index]
        self.navigation_changed.emit(self._navigation_path)

    @staticmethod
    def parse_linked_page_id(url: str) -> Optional[str]:
        """Page id from a mathwiki://<id> (or mathwiki:/<id>) link, else None."""
        parts = urlsplit(url)
        if parts.scheme != config.LINK_SCHEME:
            return None
        if parts.netloc:
            return unquote(parts.netloc)
        trimmed = unquote(parts.path).strip("/")
        return trimmed or None

    # ---- RENDERED TEXT ----
    def linked_text(self, source: str, cache_key: Hashable, current_page_id: str) -> tuple[LinkedSegment, ...]:
        """Markup-rendered, link-resolved segments of `source`, cached by `cache_key`."""
        cached = self._linked_text_cache.get(cache_key)
        if cached is not None:
            return cached

        logger.debug(f"Rendering linked text for {cache_key!r}")
        rendered = markup.render(source)
        if self.link_resolver is None:
            segments = (LinkedSegment(rendered),)
        else:
            segments = tuple(self.link_resolver.linked_segments(rendered, current_page_id))
        self._linked_text_cache[cache_key] = segments
        return segments

    def linked_markdown(self, source: str, cache_key: Hashable, current_page_id: str) -> str:
        return segments_to_markdown(self.linked_text(source, cache_key, current_page_id))

    def linked_summary(self, page: Page) -> tuple[LinkedSegment, ...]:
        return self.linked_text(page.summary_markdown, ("summary", page.id), page.id)

    def linked_step(self, page: Page, index: int) -> tuple[LinkedSegment, ...]:
        """Explanation of derivation step `index` of `page`, linked."""
        derivation = self.derivation_for(page)
        if derivation is None or not 0 <= index < len(derivation.steps):
            return ()
        step = derivation.steps[index]
        return self.linked_text(step.explanation_markdown, ("step", page.id, index), page.id)

    @staticmethod
    def rendered_equation(step: DerivationStep) -> str:
        return markup.render(step.equation)
