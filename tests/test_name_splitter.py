from __future__ import annotations

from app.data_builder.name_splitter import NameParts, split_name


def test_split_name_token_counts() -> None:
    assert split_name("Ana") == NameParts(first="Ana")
    assert split_name("Ana García") == NameParts(first="Ana", surname1="García")
    assert split_name("Ana García López") == NameParts(
        first="Ana", surname1="García", surname2="López"
    )


def test_split_name_joins_remaining_tokens_into_second_surname() -> None:
    parts = split_name("Ana María García López Pérez")

    assert parts.first == "Ana"
    assert parts.surname1 == "María"
    assert parts.surname2 == "García López Pérez"


def test_split_name_collapses_whitespace_and_handles_empty() -> None:
    assert split_name("  Ana   García  ") == NameParts(first="Ana", surname1="García")
    assert split_name("") == NameParts()
    assert split_name(None) == NameParts()
