"""Tests for entity name canonicalization."""
import pytest

from postvault.services.canonicalize import canonicalize


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("The Acme Corp.", "acme"),
        ("  OpenAI  ", "openai"),
        ("Jane's Company, Inc", "jane's company"),
        ("Jane’s Company", "jane's company"),
        ("Stripe,  LLC.", "stripe"),
        ("Globex Ltd", "globex"),
        ("Initech Co.", "initech"),
        ("Product   Led\tGrowth", "product led growth"),
        ("THE NEW YORK TIMES", "new york times"),
        ("", ""),
    ],
)
def test_canonicalize_examples(raw: str, expected: str) -> None:
    """Test documented canonicalization examples."""
    assert canonicalize(raw) == expected


def test_suffix_needs_word_boundary() -> None:
    """Names ending in the letters of a suffix keep them."""
    assert canonicalize("Disco") == "disco"
    assert canonicalize("Cisco") == "cisco"
    assert canonicalize("Zinc") == "zinc"


def test_bare_suffix_word_is_kept() -> None:
    """A name that is only a suffix word is not stripped to nothing."""
    assert canonicalize("Inc") == "inc"
    assert canonicalize("The") == "the"


@pytest.mark.parametrize(
    "raw",
    [
        "The Acme Corp.",
        "the the beatles",
        "Acme Co Inc",
        "Acme, Inc.,  LLC",
        "  The   Globex, Ltd.  ",
        "the  co",
        "O’Reilly Media",
        "\tThe\nThe Company Co.",
        "   ",
        "GPT-4",
    ],
)
def test_canonicalize_is_idempotent(raw: str) -> None:
    """Canonicalizing twice gives the same key as canonicalizing once."""
    once = canonicalize(raw)
    assert canonicalize(once) == once


def test_variants_share_a_key() -> None:
    """Spelling variants of the same company collapse to one key."""
    variants = ["Acme", "ACME", "The Acme Corp.", "acme, inc", "  Acme LLC "]
    assert {canonicalize(v) for v in variants} == {"acme"}
