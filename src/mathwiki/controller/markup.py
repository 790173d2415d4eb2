"""
Markup Renderer
===============
Rewrites the LaTeX-like markup embedded in page text into plain Unicode.

Passes run strictly in this order, each one replacing every non-overlapping
match left to right before the next one starts:

1. command glyphs (\\cdot, \\pi, ...)
2. \\frac{X}{Y}  -> (X)/(Y)
3. \\sqrt{X}     -> √(X)
4. ^{X}          -> superscript glyphs, or ^(X)
5. _{X}          -> subscript glyphs, or _(X)
6. ^c            -> superscript glyph, or ^(c)
7. _c            -> subscript glyph, or _(c)
8. strip leftover backslashes and braces

Rendering never raises: a pattern that fails to compile is logged and that
pass leaves the text untouched.
"""
from __future__ import annotations

from functools import lru_cache
from itertools import chain
from types import MappingProxyType
from typing import Callable, Mapping, Optional
import logging
import re

logger = logging.getLogger(__name__)

# ------------------------------------------------------------------------------
# Glyph tables
# ------------------------------------------------------------------------------
COMMAND_GLYPHS: Mapping[str, str] = MappingProxyType({
    "\\cdot": "·",
    "\\times": "×",
    "\\pm": "±",
    "\\to": "→",
    "\\rightarrow": "→",
    "\\leftarrow": "←",
    "\\neq": "≠",
    "\\leq": "≤",
    "\\geq": "≥",
    "\\approx": "≈",
    "\\infty": "∞",
    "\\sum": "Σ",
    "\\prod": "Π",
    "\\pi": "π",
    "\\mu": "μ",
    "\\sigma": "σ",
    "\\alpha": "α",
    "\\beta": "β",
    "\\gamma": "γ",
    "\\delta": "δ",
    "\\theta": "θ",
    "\\lambda": "λ",
})

SUPERSCRIPT_GLYPHS: Mapping[str, str] = MappingProxyType(dict(zip(
    "0123456789+-=()abcdefghijklmnoprstuvwxyz",
    "⁰¹²³⁴⁵⁶⁷⁸⁹⁺⁻⁼⁽⁾ᵃᵇᶜᵈᵉᶠᵍʰⁱʲᵏˡᵐⁿᵒᵖʳˢᵗᵘᵛʷˣʸᶻ",
)))

SUBSCRIPT_GLYPHS: Mapping[str, str] = MappingProxyType(dict(zip(
    "0123456789+-=()aehijklmnoprstuvx",
    "₀₁₂₃₄₅₆₇₈₉₊₋₌₍₎ₐₑₕᵢⱼₖₗₘₙₒₚᵣₛₜᵤᵥₓ",
)))

# Fallback markers are held back as private-use characters until the cleanup
# pass so the single-character passes cannot re-script a fallback run. Each
# render picks two that do not already occur in its input.
_MARKER_CODEPOINTS = (range(0xE000, 0xF900), range(0xF0000, 0x10FFFE))

# Longest command first so \rightarrow never loses to a shorter prefix
COMMAND_PATTERN = "|".join(
    re.escape(command) for command in sorted(COMMAND_GLYPHS, key=len, reverse=True)
)
FRACTION_PATTERN = r"\\frac\{([^{}]+)\}\{([^{}]+)\}"
SQRT_PATTERN = r"\\sqrt\{([^{}]+)\}"
BRACED_SUPERSCRIPT_PATTERN = r"\^\{([^{}]+)\}"
BRACED_SUBSCRIPT_PATTERN = r"_\{([^{}]+)\}"
BARE_SUPERSCRIPT_PATTERN = r"\^([A-Za-z0-9+\-=()])"
BARE_SUBSCRIPT_PATTERN = r"_([A-Za-z0-9+\-=()])"
LEFTOVER_PATTERN = r"[\\{}]"


@lru_cache(maxsize=None)
def compile_pattern(pattern: str) -> Optional[re.Pattern[str]]:
    """Compile once; a broken pattern degrades to None instead of raising."""
    try:
        return re.compile(pattern)
    except re.error as e:
        logger.warning(f"Markup pattern '{pattern}' failed to compile, pass skipped: {e}")
        return None


def replace_pattern(pattern: str, text: str, transform: Callable[[re.Match[str]], str]) -> str:
    """Apply `transform` to every match of `pattern`; unchanged text on a bad pattern."""
    regex = compile_pattern(pattern)
    if regex is None:
        return text
    return regex.sub(transform, text)


def convert_script(value: str, glyphs: Mapping[str, str], marker: str) -> str:
    """
    Map every character of a scripted run to its glyph.

    A single unmappable character sends the whole run to the parenthesised
    fallback, never a partial conversion.
    """
    converted = [glyphs.get(ch.lower()) for ch in value]
    if any(glyph is None for glyph in converted):
        return f"{marker}({value})"
    return "".join(converted)


def _free_markers(text: str) -> tuple[str, str]:
    present = set(text)
    free = (chr(cp) for cp in chain.from_iterable(_MARKER_CODEPOINTS) if chr(cp) not in present)
    return next(free), next(free)


def render(raw: str) -> str:
    """Render embedded markup in `raw` to display text."""
    sup_mark, sub_mark = _free_markers(raw)
    text = replace_pattern(COMMAND_PATTERN, raw, lambda m: COMMAND_GLYPHS[m.group(0)])

    text = replace_pattern(FRACTION_PATTERN, text, lambda m: f"({m.group(1)})/({m.group(2)})")
    text = replace_pattern(SQRT_PATTERN, text, lambda m: f"√({m.group(1)})")

    text = replace_pattern(
        BRACED_SUPERSCRIPT_PATTERN, text,
        lambda m: convert_script(m.group(1), SUPERSCRIPT_GLYPHS, sup_mark),
    )
    text = replace_pattern(
        BRACED_SUBSCRIPT_PATTERN, text,
        lambda m: convert_script(m.group(1), SUBSCRIPT_GLYPHS, sub_mark),
    )
    text = replace_pattern(
        BARE_SUPERSCRIPT_PATTERN, text,
        lambda m: convert_script(m.group(1), SUPERSCRIPT_GLYPHS, sup_mark),
    )
    text = replace_pattern(
        BARE_SUBSCRIPT_PATTERN, text,
        lambda m: convert_script(m.group(1), SUBSCRIPT_GLYPHS, sub_mark),
    )

    text = replace_pattern(LEFTOVER_PATTERN, text, lambda m: "")
    return text.replace(sup_mark, "^").replace(sub_mark, "_")
