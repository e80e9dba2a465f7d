"""String similarity helpers for title matching.

Edit distance is computed over grapheme clusters rather than code points so that
a decomposed accent or an emoji sequence counts as a single edit.
"""

from __future__ import annotations

import re
import unicodedata
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

_ZERO_WIDTH_JOINER = "\u200d"
_NON_WORD = re.compile(r"[^\w\s]")
_LEADING_ARTICLES = frozenset({"the", "a", "an"})
DEFAULT_KEYWORD_COUNT = 3


def graphemes(text: str) -> list[str]:
    """Split ``text`` into user-perceived characters.

    A cluster is a base code point followed by any combining marks, variation
    selectors, emoji skin-tone modifiers and zero-width-joiner continuations.
    Regional indicators pair up into one flag.
    """

    clusters: list[str] = []
    joined = False
    for char in unicodedata.normalize("NFC", text):
        if clusters and (joined or _extends_cluster(char) or _completes_flag(clusters[-1], char)):
            clusters[-1] += char
        else:
            clusters.append(char)
        joined = char == _ZERO_WIDTH_JOINER
    return clusters


def _is_regional_indicator(char: str) -> bool:
    return 0x1F1E6 <= ord(char) <= 0x1F1FF


def _completes_flag(cluster: str, char: str) -> bool:
    return (
        len(cluster) == 1
        and _is_regional_indicator(cluster)
        and _is_regional_indicator(char)
    )


def _extends_cluster(char: str) -> bool:
    if char == _ZERO_WIDTH_JOINER:
        return True
    if unicodedata.category(char) in {"Mn", "Mc", "Me"}:
        return True
    code_point = ord(char)
    # variation selectors and Fitzpatrick modifiers
    return 0xFE00 <= code_point <= 0xFE0F or 0x1F3FB <= code_point <= 0x1F3FF


def edit_distance[T](left: Sequence[T], right: Sequence[T]) -> int:
    """Levenshtein distance between two sequences using a full DP table."""

    rows = len(left) + 1
    cols = len(right) + 1
    table = [[0] * cols for _ in range(rows)]
    for i in range(rows):
        table[i][0] = i
    for j in range(cols):
        table[0][j] = j

    for i in range(1, rows):
        for j in range(1, cols):
            cost = 0 if left[i - 1] == right[j - 1] else 1
            table[i][j] = min(
                table[i - 1][j] + 1,
                table[i][j - 1] + 1,
                table[i - 1][j - 1] + cost,
            )
    return table[-1][-1]


def levenshtein(left: str, right: str) -> int:
    """Edit distance between two strings counted in grapheme clusters."""

    return edit_distance(graphemes(left), graphemes(right))


def similarity(left: str, right: str) -> float:
    """Return a normalised similarity in ``[0, 1]`` (1.0 means identical).

    Both inputs are case-folded and trimmed first.
    """

    a = left.casefold().strip()
    b = right.casefold().strip()
    if a == b:
        return 1.0
    if not a or not b:
        return 0.0
    clusters_a = graphemes(a)
    clusters_b = graphemes(b)
    longest = max(len(clusters_a), len(clusters_b))
    return 1.0 - edit_distance(clusters_a, clusters_b) / longest


def normalize_title(title: str) -> str:
    """Lowercase, drop punctuation and trim a title for search."""

    return _NON_WORD.sub("", title.lower()).strip()


def extract_keywords(title: str, *, count: int = DEFAULT_KEYWORD_COUNT) -> str:
    """Strip leading articles and keep the first ``count`` remaining tokens."""

    tokens = title.split()
    while tokens and tokens[0].casefold() in _LEADING_ARTICLES:
        tokens.pop(0)
    return " ".join(tokens[:count])
