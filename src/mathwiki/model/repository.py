"""
Content Repository
==================
Loads, decodes and validates the bundled corpus.

Why is this file needed?
------------------------
1. Integrity: the three JSON collections reference each other. A page that
   points at a missing visual or derivation must stop the load, not surface
   later as a blank screen.
2. Atomicity: the repository only swaps in the new collections after the
   whole corpus has decoded and validated. A failed load leaves the previous
   content untouched.
3. Lookup: pages, visuals and derivations are exposed by id in O(1).
"""
from __future__ import annotations

import json
import logging
import os
from typing import Any, Callable, Dict, Iterable, List, Optional, TypeVar

from mathwiki import config
from mathwiki.model.content import DerivationSpec, Page, VisualSpec
from mathwiki.model.errors import (
    CorpusDecodeError,
    DuplicatePageID,
    InvalidRelatedReference,
    MissingDerivation,
    MissingResource,
    MissingVisual,
)
from mathwiki.utils import title_sort_key

logger = logging.getLogger(__name__)

T = TypeVar("T")


def validate_corpus(
    pages: Iterable[Page],
    visuals: Iterable[VisualSpec],
    derivations: Iterable[DerivationSpec],
) -> None:
    """
    Check the cross-references of a decoded corpus.

    Fails fast on the first violation, in this order: duplicate page ids,
    then per page: visual, derivation (equations only), related pages.
    """
    pages = list(pages)
    seen_page_ids: set[str] = set()
    for page in pages:
        if page.id in seen_page_ids:
            raise DuplicatePageID(page.id)
        seen_page_ids.add(page.id)

    visual_ids = {v.id for v in visuals}
    derivation_ids = {d.id for d in derivations}

    for page in pages:
        if page.visual_spec_id not in visual_ids:
            raise MissingVisual(page.id, page.visual_spec_id)

        if page.is_equation:
            if page.derivation_id is None:
                raise MissingDerivation(page.id, None)
            if page.derivation_id not in derivation_ids:
                raise MissingDerivation(page.id, page.derivation_id)

        for related_id in page.related_page_ids:
            if related_id not in seen_page_ids:
                raise InvalidRelatedReference(page.id, related_id)


class ContentRepository:
    """Read-only access to the corpus found in `data_path`."""

    def __init__(self, data_path: Optional[str] = None) -> None:
        self.data_path = data_path or config.DATA_PATH
        self.pages: List[Page] = []
        self.page_by_id: Dict[str, Page] = {}
        self.visual_by_id: Dict[str, VisualSpec] = {}
        self.derivation_by_id: Dict[str, DerivationSpec] = {}

    def load(self) -> None:
        """
        Decode and validate the corpus, then publish it.

        Raises:
            MissingResource: a corpus file does not exist.
            CorpusDecodeError: a file or record could not be decoded.
            ValidationError: a cross-reference does not resolve.
        """
        logger.info(f"Loading corpus from: {self.data_path}")

        pages = self._decode_collection("pages", Page.from_dict)
        derivations = self._decode_collection("derivations", DerivationSpec.from_dict)
        visuals = self._decode_collection("visuals", VisualSpec.from_dict)

        try:
            validate_corpus(pages, visuals, derivations)
        except Exception as e:
            logger.error(f"Corpus validation failed: {e}")
            raise

        self.pages = sorted(pages, key=lambda p: title_sort_key(p.title))
        self.page_by_id = {p.id: p for p in self.pages}
        self.visual_by_id = {v.id: v for v in visuals}
        self.derivation_by_id = {d.id: d for d in derivations}

        logger.info(
            f"Corpus loaded: {len(self.pages)} pages, "
            f"{len(self.visual_by_id)} visuals, {len(self.derivation_by_id)} derivations."
        )

    def page(self, page_id: str) -> Optional[Page]:
        return self.page_by_id.get(page_id)

    def visual(self, visual_id: str) -> Optional[VisualSpec]:
        return self.visual_by_id.get(visual_id)

    def derivation(self, derivation_id: str) -> Optional[DerivationSpec]:
        return self.derivation_by_id.get(derivation_id)

    # ---- DECODING HELPERS ----
    def _read_json(self, name: str) -> Any:
        path = os.path.join(self.data_path, f"{name}.json")
        if not os.path.isfile(path):
            logger.error(f"Corpus file not found: {path}")
            raise MissingResource(f"{name}.json")

        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise CorpusDecodeError(name, str(e)) from e

    def _decode_collection(self, name: str, factory: Callable[[Dict[str, Any]], T]) -> List[T]:
        raw = self._read_json(name)
        if not isinstance(raw, list):
            raise CorpusDecodeError(name, f"expected a list, got {type(raw).__name__}")

        records: List[T] = []
        for index, item in enumerate(raw):
            try:
                records.append(factory(item))
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                reason = e.args[0] if isinstance(e, KeyError) and e.args else str(e)
                raise CorpusDecodeError(name, reason, index) from e

        logger.debug(f"Decoded {len(records)} records from {name}.json")
        return records
