"""
Allergen matching for shopping list items.

Exclusion is plain set intersection of tags: no partial matching and no
allergen hierarchy ("tree_nuts" does not imply "peanuts").
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Iterable, Optional, Union

DEFAULT_EXCLUDE_REASON = "Аллергия"


@dataclass(frozen=True)
class AllergenVerdict:
    """Outcome of matching a product against a user's allergies."""

    is_excluded: bool
    reason: Optional[str] = None
    matched: frozenset[str] = frozenset()


def classify(
    product_allergens: Iterable[str],
    user_allergens: Iterable[str],
    reason: str = DEFAULT_EXCLUDE_REASON,
) -> AllergenVerdict:
    """Decide whether a product is excluded for a user."""
    matched = frozenset(product_allergens) & frozenset(user_allergens)
    if matched:
        return AllergenVerdict(is_excluded=True, reason=reason, matched=matched)
    return AllergenVerdict(is_excluded=False)


def parse_allergen_tags(raw: Union[str, Iterable[str], None]) -> list[str]:
    """Decode allergen tags as stored (JSON-encoded array text or a list).

    Raises:
        ValueError: If a string value is not a JSON array of strings.
    """
    if raw is None:
        return []
    if isinstance(raw, str):
        if not raw.strip():
            return []
        decoded = json.loads(raw)
        if not isinstance(decoded, list) or not all(isinstance(t, str) for t in decoded):
            raise ValueError(f"allergens must be a JSON array of strings, got {raw!r}")
        return decoded
    return [str(tag) for tag in raw]
