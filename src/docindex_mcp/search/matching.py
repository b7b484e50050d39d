"""Match classification for name/path queries.

Matching is strictly substring-based: no fuzzy or typo-tolerant matching.
Name queries match item names and paths; type queries (``a, b -> c``) match
the parameter and return types of an item signature.
"""

from collections.abc import Sequence
from enum import IntEnum

from docindex_mcp.index.paths import SearchKeys


class MatchClass(IntEnum):
    """Strength of a query match. Lower values rank first."""

    EXACT = 0
    PREFIX = 1
    SUBSTRING = 2
    NO_MATCH = 3


def classify(needle: str, haystack: str) -> MatchClass:
    """Classify how ``needle`` occurs in ``haystack``.

    Both strings are expected to be case-folded already.

    Examples:
        >>> classify("foo", "foo")
        <MatchClass.EXACT: 0>
        >>> classify("foo", "foobar")
        <MatchClass.PREFIX: 1>
        >>> classify("foo", "bazfoo")
        <MatchClass.SUBSTRING: 2>
        >>> classify("", "anything")
        <MatchClass.NO_MATCH: 3>
    """
    if not needle:
        return MatchClass.NO_MATCH
    if needle == haystack:
        return MatchClass.EXACT
    if haystack.startswith(needle):
        return MatchClass.PREFIX
    if needle in haystack:
        return MatchClass.SUBSTRING
    return MatchClass.NO_MATCH


def classify_item(needle: str, keys: SearchKeys) -> MatchClass:
    """Match against the item name, then its owner-qualified name, then its path.

    A later key is only consulted when the earlier ones do not match at all,
    so a name hit always wins over a path hit.
    """
    for haystack in (keys.name, keys.display_name, keys.path):
        match = classify(needle, haystack)
        if match is not MatchClass.NO_MATCH:
            return match
    return MatchClass.NO_MATCH


def classify_signature(params: Sequence[str], returns: str, keys: SearchKeys) -> MatchClass:
    """Match a type query such as ``usize -> vec`` against an item signature.

    Every queried parameter type must match one of the item's parameter
    types, and a queried return type must match the rendered return type.
    The result is the weakest of those matches, so ``usize -> vec`` against
    ``(self, usize) -> (vec<usize>, usize)`` is a substring match.
    """
    weakest = MatchClass.EXACT
    for needle in params:
        best = min((classify(needle, param) for param in keys.params), default=MatchClass.NO_MATCH)
        if best is MatchClass.NO_MATCH:
            return best
        weakest = max(weakest, best)
    if returns:
        match = classify(returns, keys.returns)
        if match is MatchClass.NO_MATCH:
            return match
        weakest = max(weakest, match)
    return weakest
