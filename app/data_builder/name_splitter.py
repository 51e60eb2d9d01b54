"""Split a full name into given name and two surnames."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class NameParts:
    """Result of splitting a Spanish-style full name."""

    first: str = ""
    surname1: str = ""
    surname2: str = ""


def split_name(full_name: str | None) -> NameParts:
    """Split on whitespace: first token, second token, then the rest.

    Compound given names ("Ana María") are not detected, so the second word
    lands in ``surname1``.
    """
    tokens = (full_name or "").split()
    if not tokens:
        return NameParts()
    if len(tokens) == 1:
        return NameParts(first=tokens[0])
    if len(tokens) == 2:
        return NameParts(first=tokens[0], surname1=tokens[1])
    return NameParts(first=tokens[0], surname1=tokens[1], surname2=" ".join(tokens[2:]))
