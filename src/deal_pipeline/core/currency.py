"""Currencies a deal amount can be declared in."""

from __future__ import annotations

from enum import Enum


class CurrencyType(str, Enum):
    """ISO codes accepted for deal amounts."""

    EUR = "EUR"
    USD = "USD"
    INR = "INR"
