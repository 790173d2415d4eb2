"""
Graph Models
============
Function models behind the 2D graphs shown next to a page.

Why is this file needed?
------------------------
1. Registry: a visual's `modelID` selects one of the models below; unknown
   ids plot as a straight line instead of failing.
2. Sampling: curves are evaluated with numpy over the visual's viewport.
   Points where a function is undefined come back as NaN, so a plotter can
   break the line there.
3. Derivations: an interactive derivation borrows the page visual's sliders
   and bounds for its own model (interactive_visual_for()).
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Mapping, Optional
import logging
import math
from types import MappingProxyType

import numpy as np

from mathwiki.model.content import DerivationSpec, VisualKind, VisualSpec

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)

DEFAULT_BOUND = 10.0
MIN_SAMPLES = 220
MAX_SAMPLES = 520


@dataclass(frozen=True)
class GraphViewport:
    x_min: float = -DEFAULT_BOUND
    x_max: float = DEFAULT_BOUND
    y_min: float = -DEFAULT_BOUND
    y_max: float = DEFAULT_BOUND


# ==========================================
# ABSTRACT CLASS FOR GRAPH MODELS
# ==========================================
class GraphModel(ABC):
    """
    A function y = f(x; params) plotted next to a page.
    """
    NAME: str = "Graph Model"
    DEFAULTS: Mapping[str, float] = {}

    def param(self, params: Mapping[str, float], key: str) -> float:
        return float(params.get(key, self.DEFAULTS[key]))

    @abstractmethod
    def y_values(
        self,
        x: npt.NDArray[np.float64],
        params: Mapping[str, float],
    ) -> npt.NDArray[np.float64]:
        """
        Evaluate the model.

        Args:
            x: Sample positions.
            params: Parameter values by id; missing ids use DEFAULTS.

        Returns:
            y values, NaN where the function is undefined.
        """
        pass


class LinearModel(GraphModel):
    NAME = "Linear"
    DEFAULTS = {"a": 1.0, "b": 0.0}

    def y_values(self, x, params):
        return self.param(params, "a") * x + self.param(params, "b")


class QuadraticModel(GraphModel):
    NAME = "Quadratic"
    DEFAULTS = {"a": 1.0, "b": 0.0, "c": 0.0}

    def y_values(self, x, params):
        a, b, c = (self.param(params, k) for k in ("a", "b", "c"))
        return a * x**2 + b * x + c


class CubicModel(GraphModel):
    NAME = "Cubic"
    DEFAULTS = {"a": 1.0, "b": 0.0, "c": 0.0, "d": 0.0}

    def y_values(self, x, params):
        a, b, c, d = (self.param(params, k) for k in ("a", "b", "c", "d"))
        return a * x**3 + b * x**2 + c * x + d


class ExponentialModel(GraphModel):
    NAME = "Exponential"
    DEFAULTS = {"a": 1.0, "b": 1.0}

    def y_values(self, x, params):
        with np.errstate(over="ignore"):
            return self.param(params, "a") * np.exp(self.param(params, "b") * x)


class LogarithmModel(GraphModel):
    NAME = "Logarithm"
    DEFAULTS = {"a": 1.0, "b": 1.0}

    def y_values(self, x, params):
        shifted = x + self.param(params, "b")
        # Undefined for x + b <= 0
        safe = np.where(shifted > 0, shifted, 1.0)
        return np.where(shifted > 0, self.param(params, "a") * np.log(safe), np.nan)


class SineModel(GraphModel):
    NAME = "Sine"
    DEFAULTS = {"a": 1.0, "b": 1.0, "c": 0.0, "d": 0.0}

    def y_values(self, x, params):
        a, b, c, d = (self.param(params, k) for k in ("a", "b", "c", "d"))
        return a * np.sin(b * x + c) + d


class NormalDistributionModel(GraphModel):
    NAME = "Normal Distribution"
    DEFAULTS = {"mu": 0.0, "sigma": 1.0}

    def y_values(self, x, params):
        mu = self.param(params, "mu")
        sigma = max(self.param(params, "sigma"), 1e-4)
        coefficient = 1.0 / (sigma * math.sqrt(2.0 * math.pi))
        return coefficient * np.exp(-((x - mu) ** 2) / (2.0 * sigma**2))


class RegressionModel(GraphModel):
    NAME = "Regression Line"
    DEFAULTS = {"m": 1.0, "b": 0.0}

    def y_values(self, x, params):
        return self.param(params, "m") * x + self.param(params, "b")


class BayesPosteriorModel(GraphModel):
    """Posterior P(H|E) as a function of the prior P(H) = x."""
    NAME = "Bayes Posterior"
    DEFAULTS = {"sensitivity": 0.9, "falsePositive": 0.1}

    def y_values(self, x, params):
        prior = np.clip(x, 1e-4, 0.9999)
        sensitivity = min(max(self.param(params, "sensitivity"), 1e-4), 0.9999)
        false_positive = min(max(self.param(params, "falsePositive"), 1e-4), 0.9999)
        return (sensitivity * prior) / (sensitivity * prior + false_positive * (1.0 - prior))


# ==========================================
# REGISTRY
# ==========================================
GRAPH_MODELS: Dict[str, GraphModel] = {
    "linear": LinearModel(),
    "quadratic": QuadraticModel(),
    "cubic": CubicModel(),
    "exponential": ExponentialModel(),
    "logarithm": LogarithmModel(),
    "sine": SineModel(),
    "normal": NormalDistributionModel(),
    "regression": RegressionModel(),
    "bayes": BayesPosteriorModel(),
}

FALLBACK_METADATA: Mapping[str, str] = MappingProxyType({
    "xMin": "-10",
    "xMax": "10",
    "yMin": "-10",
    "yMax": "10",
})


def model_for(model_id: str) -> GraphModel:
    """Unknown model ids fall back to a straight line."""
    model = GRAPH_MODELS.get(model_id)
    if model is None:
        logger.warning(f"Unknown graph model '{model_id}', using linear.")
        return GRAPH_MODELS["linear"]
    return model


def default_parameters(visual: VisualSpec) -> Dict[str, float]:
    return {p.id: p.default_value for p in visual.parameters}


def _metadata_float(metadata: Mapping[str, str], key: str, default: float) -> float:
    try:
        return float(metadata[key])
    except (KeyError, ValueError):
        return default


def viewport_for(visual: VisualSpec) -> GraphViewport:
    m = visual.metadata
    return GraphViewport(
        x_min=_metadata_float(m, "xMin", -DEFAULT_BOUND),
        x_max=_metadata_float(m, "xMax", DEFAULT_BOUND),
        y_min=_metadata_float(m, "yMin", -DEFAULT_BOUND),
        y_max=_metadata_float(m, "yMax", DEFAULT_BOUND),
    )


def sample_count_for_width(width: float) -> int:
    return min(max(int(width * 1.2), MIN_SAMPLES), MAX_SAMPLES)


def sample_curve(
    model: GraphModel,
    params: Mapping[str, float],
    viewport: GraphViewport,
    samples: int = MIN_SAMPLES,
) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
    """
    Evaluate `model` on samples + 1 evenly spaced points across the viewport.

    Non-finite y values are returned as NaN; a plotter breaks the line there.
    """
    x = np.linspace(viewport.x_min, viewport.x_max, max(samples, 1) + 1)
    with np.errstate(invalid="ignore", divide="ignore", over="ignore"):
        y = np.asarray(model.y_values(x, params), dtype=np.float64)
    y = np.where(np.isfinite(y), y, np.nan)
    return x, y


def interactive_visual_for(
    derivation: DerivationSpec,
    visual: Optional[VisualSpec],
) -> Optional[VisualSpec]:
    """
    The graph shown next to a derivation's playback, if any.

    A derivation with its own interactive model gets a synthesised graph
    borrowing the page visual's sliders and bounds.
    """
    if derivation.interactive_model_id is not None:
        return VisualSpec(
            id=f"interactive-{derivation.id}",
            kind=VisualKind.GRAPH_2D,
            model_id=derivation.interactive_model_id,
            parameters=visual.parameters if visual is not None else (),
            metadata=visual.metadata if visual is not None else FALLBACK_METADATA,
        )
    if visual is not None and visual.kind == VisualKind.GRAPH_2D:
        return visual
    return None
