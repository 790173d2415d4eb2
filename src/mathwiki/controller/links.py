"""
Link Resolver
=============
Turns free text into plain and linked segments, wiki style.

Why is this file needed?
------------------------
Page bodies mention other topics ("... see the quadratic formula"). Every
page title and alias becomes a dictionary term; the resolver finds those
terms in arbitrary text and marks them as links to their page.

Matching rules:
1. Tokens are maximal runs of ASCII letters and digits.
2. Longest phrase first (maximal munch), bounded by the longest term.
3. A page never links to itself.
4. A multi-word phrase only matches across whitespace, so
   "quadratic, formula" is not "quadratic formula".
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence
import logging

from mathwiki import config
from mathwiki.controller.markup import compile_pattern
from mathwiki.model.content import LinkedSegment, Page
from mathwiki.utils import markdown_escape, normalize_search_key

logger = logging.getLogger(__name__)

TOKEN_PATTERN = r"[A-Za-z0-9]+"


@dataclass(frozen=True)
class Token:
    normalized: str
    start: int
    end: int


def tokenize(text: str) -> List[Token]:
    """Word tokens with their source ranges; empty if the pattern is unusable."""
    regex = compile_pattern(TOKEN_PATTERN)
    if regex is None:
        return []
    return [
        Token(normalize_search_key(m.group(0)), m.start(), m.end())
        for m in regex.finditer(text)
    ]


def build_term_dictionary(pages: Iterable[Page]) -> Dict[str, str]:
    """
    Map every normalized title and alias to its page id.

    Pages with longer titles claim a term first; after that the first
    writer wins.
    """
    mapping: Dict[str, str] = {}
    for page in sorted(pages, key=lambda p: len(p.title), reverse=True):
        for term in (page.title, *page.aliases):
            normalized = normalize_search_key(term)
            if normalized and normalized not in mapping:
                mapping[normalized] = page.id
    return mapping


class LinkResolver:
    def __init__(self, pages: Iterable[Page]) -> None:
        self.term_to_page_id = build_term_dictionary(pages)
        self.max_term_word_count = max(
            (len(term.split(" ")) for term in self.term_to_page_id),
            default=1,
        )
        logger.debug(
            f"Link dictionary built: {len(self.term_to_page_id)} terms, "
            f"longest {self.max_term_word_count} words."
        )

    def linked_segments(self, text: str, current_page_id: str) -> List[LinkedSegment]:
        """Split `text` into segments; recognised terms carry their target page id."""
        tokens = tokenize(text)
        if not tokens:
            return [LinkedSegment(text)]

        matches = self._find_matches(text, tokens, current_page_id)
        if not matches:
            return [LinkedSegment(text)]

        segments: List[LinkedSegment] = []
        cursor = 0
        for start, end, target in matches:
            if cursor < start:
                segments.append(LinkedSegment(text[cursor:start]))
            segments.append(LinkedSegment(text[start:end], target))
            cursor = end
        if cursor < len(text):
            segments.append(LinkedSegment(text[cursor:]))

        return [s for s in segments if s.text]

    def _find_matches(
        self,
        text: str,
        tokens: Sequence[Token],
        current_page_id: str,
    ) -> List[tuple[int, int, str]]:
        matches: List[tuple[int, int, str]] = []
        index = 0

        while index < len(tokens):
            longest = min(self.max_term_word_count, len(tokens) - index)
            for length in range(longest, 0, -1):
                first, last = tokens[index], tokens[index + length - 1]
                phrase = " ".join(t.normalized for t in tokens[index:index + length])

                target = self.term_to_page_id.get(phrase)
                if target is None or target == current_page_id:
                    continue

                # Punctuation between the words breaks the phrase
                if length > 1 and not text[first.end:last.start].isspace():
                    continue

                matches.append((first.start, last.end, target))
                index += length
                break
            else:
                index += 1

        return matches


def segments_to_markdown(segments: Iterable[LinkedSegment], scheme: str = config.LINK_SCHEME) -> str:
    """Join segments into markdown, linked ones as [text](scheme://page-id)."""
    parts = []
    for segment in segments:
        if segment.target_page_id is None:
            parts.append(segment.text)
        else:
            parts.append(f"[{markdown_escape(segment.text)}]({scheme}://{segment.target_page_id})")
    return "".join(parts)
