"""Utility helpers for calculator modules."""

from __future__ import annotations


def format_percentage(value: float) -> str:
    """Return a human-readable percentage label for ``value``."""

    percentage = round(value * 100, 6)
    if float(int(percentage)) == percentage:
        return f"{int(percentage)}%"
    return f"{percentage:.2f}%"


def format_amount(value: float) -> str:
    """Group whole currency units with dots, as in ``20.000.000``."""

    return f"{round(value):,}".replace(",", ".")


def round_currency(value: float) -> float:
    """Round monetary amounts to two decimals."""

    return round(value, 2)


def round_rate(value: float) -> float:
    """Round rate values to four decimals."""

    return round(value, 4)
