"""
Content Data Model
==================
Defines the immutable records the corpus is made of.

Why is this file needed?
------------------------
1. Typing: pages, visuals and derivations are decoded once from JSON into
   frozen dataclasses; nothing downstream touches raw dictionaries.
2. Schema: from_dict() is the single place that knows the JSON field names
   and rejects records with missing fields or wrong types.

Classes:
    Page, VisualSpec, VisualParameter, DerivationSpec, DerivationStep:
        corpus records.
    SearchIndexEntry, LinkedSegment: derived records.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional


# ------------------------------------------------------------------------------
# Enums
# ------------------------------------------------------------------------------
class PageType(StrEnum):
    CONCEPT = "concept"
    EQUATION = "equation"
    NUMBER = "number"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


class VisualKind(StrEnum):
    GRAPH_2D = "graph2D"
    ANIMATION = "animation"
    LATTICE = "lattice"
    TIMELINE = "timeline"


# ------------------------------------------------------------------------------
# Field helpers
# ------------------------------------------------------------------------------
def _field(data: Mapping[str, Any], key: str, kind: type | tuple[type, ...]) -> Any:
    if not isinstance(data, Mapping):
        raise TypeError(f"expected an object, got {type(data).__name__}")
    if key not in data:
        raise KeyError(f"missing required field '{key}'")
    value = data[key]
    # bool is an int subclass; it is never a valid number here
    if isinstance(value, bool) and bool not in (kind if isinstance(kind, tuple) else (kind,)):
        raise TypeError(f"field '{key}' has type bool")
    if not isinstance(value, kind):
        raise TypeError(f"field '{key}' has type {type(value).__name__}")
    return value


def _optional_field(data: Mapping[str, Any], key: str, kind: type) -> Any:
    if data.get(key) is None:
        return None
    return _field(data, key, kind)


def _string_list(data: Mapping[str, Any], key: str) -> tuple[str, ...]:
    values = _field(data, key, list)
    if not all(isinstance(v, str) for v in values):
        raise TypeError(f"field '{key}' must be a list of strings")
    return tuple(values)


# ------------------------------------------------------------------------------
# Corpus records
# ------------------------------------------------------------------------------
@dataclass(frozen=True)
class Page:
    """One topic page of the corpus."""
    id: str
    title: str
    type: PageType
    summary_markdown: str
    aliases: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()
    related_page_ids: tuple[str, ...] = ()
    visual_spec_id: str = ""
    derivation_id: Optional[str] = None

    @property
    def is_equation(self) -> bool:
        return self.type == PageType.EQUATION

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "type": self.type.value,
            "summaryMarkdown": self.summary_markdown,
            "aliases": list(self.aliases),
            "tags": list(self.tags),
            "relatedPageIDs": list(self.related_page_ids),
            "visualSpecID": self.visual_spec_id,
            "derivationID": self.derivation_id,
        }

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> Page:
        return Page(
            id=_field(data, "id", str),
            title=_field(data, "title", str),
            type=PageType(_field(data, "type", str)),
            summary_markdown=_field(data, "summaryMarkdown", str),
            aliases=_string_list(data, "aliases"),
            tags=_string_list(data, "tags"),
            related_page_ids=_string_list(data, "relatedPageIDs"),
            visual_spec_id=_field(data, "visualSpecID", str),
            derivation_id=_optional_field(data, "derivationID", str),
        )


@dataclass(frozen=True)
class VisualParameter:
    """A named numeric slider: min <= default_value <= max."""
    id: str
    label: str
    min: float
    max: float
    step: float
    default_value: float

    def __post_init__(self) -> None:
        if not self.min <= self.default_value <= self.max:
            raise ValueError(
                f"parameter '{self.id}' default {self.default_value} "
                f"outside [{self.min}, {self.max}]"
            )

    def clamp(self, value: float) -> float:
        return min(max(value, self.min), self.max)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "min": self.min,
            "max": self.max,
            "step": self.step,
            "defaultValue": self.default_value,
        }

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> VisualParameter:
        number = (int, float)
        return VisualParameter(
            id=_field(data, "id", str),
            label=_field(data, "label", str),
            min=float(_field(data, "min", number)),
            max=float(_field(data, "max", number)),
            step=float(_field(data, "step", number)),
            default_value=float(_field(data, "defaultValue", number)),
        )


@dataclass(frozen=True)
class VisualSpec:
    """How a page is visualised; `model_id` selects the function to plot."""
    id: str
    kind: VisualKind
    model_id: str
    parameters: tuple[VisualParameter, ...] = ()
    metadata: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}), hash=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "kind": self.kind.value,
            "modelID": self.model_id,
            "parameters": [p.to_dict() for p in self.parameters],
            "metadata": dict(self.metadata),
        }

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> VisualSpec:
        metadata = _field(data, "metadata", dict)
        if not all(isinstance(k, str) and isinstance(v, str) for k, v in metadata.items()):
            raise TypeError("field 'metadata' must map strings to strings")
        return VisualSpec(
            id=_field(data, "id", str),
            kind=VisualKind(_field(data, "kind", str)),
            model_id=_field(data, "modelID", str),
            parameters=tuple(VisualParameter.from_dict(p) for p in _field(data, "parameters", list)),
            metadata=MappingProxyType(dict(metadata)),
        )


@dataclass(frozen=True)
class DerivationStep:
    equation: str
    explanation_markdown: str
    animation_hint: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "equation": self.equation,
            "explanationMarkdown": self.explanation_markdown,
            "animationHint": self.animation_hint,
        }

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> DerivationStep:
        return DerivationStep(
            equation=_field(data, "equation", str),
            explanation_markdown=_field(data, "explanationMarkdown", str),
            animation_hint=_optional_field(data, "animationHint", str),
        )


@dataclass(frozen=True)
class DerivationSpec:
    """An ordered, non-empty walk-through of an equation."""
    id: str
    steps: tuple[DerivationStep, ...]
    interactive_model_id: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.steps:
            raise ValueError(f"derivation '{self.id}' has no steps")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "steps": [s.to_dict() for s in self.steps],
            "interactiveModelID": self.interactive_model_id,
        }

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> DerivationSpec:
        return DerivationSpec(
            id=_field(data, "id", str),
            steps=tuple(DerivationStep.from_dict(s) for s in _field(data, "steps", list)),
            interactive_model_id=_optional_field(data, "interactiveModelID", str),
        )


# ------------------------------------------------------------------------------
# Derived records
# ------------------------------------------------------------------------------
@dataclass(frozen=True)
class SearchIndexEntry:
    page_id: str
    title_normalized: str
    aliases_normalized: tuple[str, ...]
    tags_normalized: tuple[str, ...]


@dataclass(frozen=True)
class LinkedSegment:
    """A run of text, linked to `target_page_id` when it is set."""
    text: str
    target_page_id: Optional[str] = None

    @property
    def is_link(self) -> bool:
        return self.target_page_id is not None
