"""Entity name canonicalization for deduplication."""
import re

_CURLY_APOSTROPHES = re.compile(r"[‘’]")
_WHITESPACE = re.compile(r"\s+")
_LEADING_THE = re.compile(r"^the\s+", re.IGNORECASE)
_LEGAL_SUFFIX = re.compile(r"(?:,\s*|\s+)(?:inc|llc|ltd|corp|co)\.?$", re.IGNORECASE)


def _canonicalize_once(name: str) -> str:
    value = name.lower().strip()
    value = _CURLY_APOSTROPHES.sub("'", value)
    value = _WHITESPACE.sub(" ", value)
    value = _LEADING_THE.sub("", value)
    value = _LEGAL_SUFFIX.sub("", value)
    return value.strip()


def canonicalize(name: str) -> str:
    """Map a raw entity name to the key used for deduplication.

    Lowercases, trims, normalizes curly apostrophes, collapses whitespace,
    and strips a leading "the " and a trailing legal suffix
    (", Inc", " LLC", " Corp." ...).

    The rules are applied until nothing changes, so the result is a fixed
    point: ``canonicalize(canonicalize(x)) == canonicalize(x)``.

    Examples:
        >>> canonicalize("The Acme Corp.")
        'acme'
        >>> canonicalize("Jane's Company, Inc")
        "jane's company"
    """
    current = name
    while True:
        nxt = _canonicalize_once(current)
        if nxt == current:
            return nxt
        current = nxt
