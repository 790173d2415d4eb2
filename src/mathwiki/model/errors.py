"""
Content Errors
==============
Everything that can go wrong while loading the bundled corpus.

Search and link resolution have no error type: an empty result is a valid
answer. Markup rendering degrades instead of raising.
"""
from __future__ import annotations


class ContentError(Exception):
    """Root of all corpus loading failures."""


class MissingResource(ContentError):
    """A required corpus file could not be found."""

    def __init__(self, resource: str) -> None:
        super().__init__(f"Missing resource: {resource}")
        self.resource = resource


class CorpusDecodeError(ContentError):
    """A corpus file is not valid JSON or a record does not match its schema."""

    def __init__(self, collection: str, reason: str, index: int | None = None) -> None:
        where = collection if index is None else f"{collection}[{index}]"
        super().__init__(f"Could not decode {where}: {reason}")
        self.collection = collection
        self.index = index
        self.reason = reason


class ValidationError(ContentError):
    """The corpus decoded but its cross-references are inconsistent."""


class DuplicatePageID(ValidationError):
    def __init__(self, page_id: str) -> None:
        super().__init__(f"Duplicate page id '{page_id}'")
        self.page_id = page_id


class MissingVisual(ValidationError):
    def __init__(self, page_id: str, visual_id: str) -> None:
        super().__init__(f"Page '{page_id}' references unknown visual '{visual_id}'")
        self.page_id = page_id
        self.visual_id = visual_id


class MissingDerivation(ValidationError):
    """
    An equation page without a usable derivation.

    `derivation_id` is ABSENT_DERIVATION when the page has no reference at
    all, otherwise the unresolvable id.
    """
    ABSENT_DERIVATION = "<missing>"

    def __init__(self, page_id: str, derivation_id: str | None) -> None:
        derivation_id = derivation_id if derivation_id is not None else self.ABSENT_DERIVATION
        super().__init__(f"Equation page '{page_id}' has no resolvable derivation ('{derivation_id}')")
        self.page_id = page_id
        self.derivation_id = derivation_id

    @property
    def is_absent(self) -> bool:
        return self.derivation_id == self.ABSENT_DERIVATION


class InvalidRelatedReference(ValidationError):
    def __init__(self, page_id: str, related_id: str) -> None:
        super().__init__(f"Page '{page_id}' lists unknown related page '{related_id}'")
        self.page_id = page_id
        self.related_id = related_id
