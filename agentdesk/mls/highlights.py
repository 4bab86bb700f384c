"""
Listing highlight extraction.

Short selling points shown on property cards, derived from structured
listing fields in a fixed priority order.
"""

import re
from typing import Iterable, List, Optional

MAX_HIGHLIGHTS = 6
MAX_INTERIOR_HIGHLIGHTS = 3

INTERIOR_KEYWORDS = re.compile(
    r'fireplace|hardwood|granite|stainless|updated|renovated|open.*floor',
    re.IGNORECASE,
)


def build_highlights(
    year_built: Optional[int] = None,
    garage_spaces: Optional[float] = None,
    has_pool: bool = False,
    stories: Optional[float] = None,
    view: Optional[str] = None,
    lot_acres: Optional[float] = None,
    interior_features: Optional[Iterable[str]] = None,
) -> List[str]:
    """Build at most six highlights from listing attributes."""
    highlights = []

    if year_built:
        highlights.append(f"Built in {year_built}")
    if garage_spaces:
        highlights.append(f"{_number(garage_spaces)}-car garage")
    if has_pool:
        highlights.append("Pool")
    if stories and stories > 1:
        highlights.append(f"{_number(stories)} stories")
    if view:
        highlights.append(f"{view} view")
    if lot_acres and lot_acres > 0.5:
        highlights.append(f"{lot_acres:.2f} acre lot")

    if interior_features:
        matching = [f for f in interior_features if f and INTERIOR_KEYWORDS.search(f)]
        highlights.extend(matching[:MAX_INTERIOR_HIGHLIGHTS])

    return highlights[:MAX_HIGHLIGHTS]


def _number(value: float) -> str:
    # 2.0 -> "2", 1.5 -> "1.5"
    return str(int(value)) if float(value).is_integer() else str(value)
