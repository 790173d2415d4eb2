"""
Corpus Fixtures

Small, explicit corpora for repository, search, link and store tests.
Every record is spelled out; nothing is random.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from mathwiki.model.content import Page


def page_dict(
    page_id: str,
    title: str,
    *,
    page_type: str = "concept",
    summary: str = "",
    aliases: Optional[List[str]] = None,
    tags: Optional[List[str]] = None,
    related: Optional[List[str]] = None,
    visual: str = "visual-linear",
    derivation: Optional[str] = None,
) -> Dict[str, Any]:
    return {
        "id": page_id,
        "title": title,
        "type": page_type,
        "summaryMarkdown": summary,
        "aliases": aliases or [],
        "tags": tags or [],
        "relatedPageIDs": related or [],
        "visualSpecID": visual,
        "derivationID": derivation,
    }


def make_page(page_id: str, title: str, **kwargs: Any) -> Page:
    return Page.from_dict(page_dict(page_id, title, **kwargs))


def visual_dict(visual_id: str = "visual-linear", model_id: str = "linear") -> Dict[str, Any]:
    return {
        "id": visual_id,
        "kind": "graph2D",
        "modelID": model_id,
        "parameters": [
            {"id": "a", "label": "a", "min": -5, "max": 5, "step": 0.1, "defaultValue": 1},
            {"id": "b", "label": "b", "min": -5, "max": 5, "step": 0.1, "defaultValue": 0},
        ],
        "metadata": {"xMin": "-5", "xMax": "5"},
    }


def derivation_dict(derivation_id: str = "derivation-qf", interactive: Optional[str] = None) -> Dict[str, Any]:
    return {
        "id": derivation_id,
        "steps": [
            {"equation": "a x^2 + b x + c = 0", "explanationMarkdown": "Start from a polynomial.", "animationHint": None},
            {"equation": "x = \\frac{-b}{2a}", "explanationMarkdown": "Solve for x.", "animationHint": "solve"},
        ],
        "interactiveModelID": interactive,
    }


def sample_pages() -> List[Dict[str, Any]]:
    return [
        page_dict(
            "quadratic-formula", "Quadratic Formula",
            page_type="equation",
            summary="Solves every polynomial of degree two.",
            aliases=["roots of a quadratic"],
            tags=["Algebra"],
            related=["polynomial"],
            derivation="derivation-qf",
        ),
        page_dict(
            "polynomial", "Polynomial",
            summary="Degree two polynomials are solved by the quadratic formula.",
            tags=["Algebra"],
            related=["quadratic-formula"],
        ),
        page_dict(
            "normal-distribution", "Normal Distribution",
            summary="A bell curve with mean mu.",
            aliases=["gaussian"],
            tags=["Statistics"],
        ),
    ]


def write_corpus(
    directory: Path,
    pages: Optional[List[Dict[str, Any]]] = None,
    visuals: Optional[List[Dict[str, Any]]] = None,
    derivations: Optional[List[Dict[str, Any]]] = None,
) -> Path:
    collections = {
        "pages": sample_pages() if pages is None else pages,
        "visuals": [visual_dict()] if visuals is None else visuals,
        "derivations": [derivation_dict()] if derivations is None else derivations,
    }
    for name, records in collections.items():
        (directory / f"{name}.json").write_text(json.dumps(records), encoding="utf-8")
    return directory


