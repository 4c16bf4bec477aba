"""Rounding of aggregated quantities to purchasable package sizes."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from app.services.errors import ValidationError


@dataclass(frozen=True)
class PackageRounding:
    """Purchase-ready quantity for one shopping list item."""

    rounded_grams: float
    packages_needed: Optional[int]


def round_to_packages(total_grams: float, package_size: Optional[float]) -> PackageRounding:
    """Round a raw gram total up to whole packages.

    Under-buying is never acceptable: 10 g of a 1000 g product is one
    package. Without a positive package size only fractional grams are
    rounded up and packages_needed is None. A zero total needs zero
    packages.

    Raises:
        ValidationError: If total_grams is negative.
    """
    if total_grams < 0:
        raise ValidationError(f"total grams must not be negative, got {total_grams}")

    if package_size is not None and package_size > 0:
        packages = math.ceil(total_grams / package_size)
        return PackageRounding(
            rounded_grams=packages * package_size,
            packages_needed=packages,
        )

    return PackageRounding(rounded_grams=math.ceil(total_grams), packages_needed=None)
