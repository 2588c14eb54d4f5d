# instrtime/core/grammar.py
"""
Ordered regular-expression grammars for the textual time formats.

A cascade is a tuple of :class:`Grammar` objects tried in order; the first
one whose pattern matches the *whole* input wins, even when a later one
would also match.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

from .timevalue import NANO


FRACTION_DIGITS = 9


@dataclass(frozen=True, slots=True)
class Grammar:
    name: str
    pattern: re.Pattern
    fields: tuple[str, ...]

    def match(self, text: str) -> dict[str, str] | None:
        m = self.pattern.fullmatch(text)
        if m is None:
            return None
        return {name: value for name, value in zip(self.fields, m.groups()) if value is not None}

    @property
    def checked(self) -> frozenset[str]:
        """Fields subject to strict range checks."""
        return frozenset(self.fields) - {"fraction", "days", "sign"}


def grammar(name: str, regex: str, *fields: str) -> Grammar:
    return Grammar(name=name, pattern=re.compile(regex), fields=tuple(fields))


def match_first(grammars: Iterable[Grammar], text: str) -> tuple[Grammar, dict[str, str]] | None:
    for g in grammars:
        groups = g.match(text)
        if groups is not None:
            return g, groups
    return None


def fraction_to_nanoseconds(digits: str | None) -> int:
    """
    Convert the digits after a decimal point to nanoseconds.

    Only the first 9 digits are significant; a 10th digit of 5..9 rounds the
    9th up and anything after it is ignored. An empty string is zero.
    """
    if not digits:
        return 0
    head = digits[:FRACTION_DIGITS]
    ns = int(head) * (NANO // 10 ** len(head))
    if len(digits) > FRACTION_DIGITS and digits[FRACTION_DIGITS] >= "5":
        ns += 1
    return ns


def truncate_fraction(nanoseconds: int, length: int) -> str:
    """First *length* digits of a 9-digit nanosecond fraction, without rounding."""
    if length <= 0:
        return ""
    length = min(length, FRACTION_DIGITS)
    return f"{nanoseconds:09d}"[:length]
