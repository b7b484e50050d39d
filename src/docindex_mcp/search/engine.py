"""Query engine: ranked name/path search over loaded indexes.

Ranking key, ascending: (match class, kind priority, library order,
catalog position). Catalog position is unique per library, so the order is
total and two identical calls always return identical results.

Queries may start with a kind filter in rustdoc style, e.g. ``fn:enumerate``
or ``trait:graph``. Unknown prefixes are treated as ordinary query text.

A query containing ``->`` searches signatures instead of names:
``usize -> vec`` finds items taking a ``usize`` and returning a ``vec``,
``-> zip`` matches on the return type alone and ``self, i ->`` on
parameters alone. Type matches rank through the same key.
"""

from __future__ import annotations

import heapq
import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from docindex_mcp.errors import NotReady
from docindex_mcp.index.kinds import DEFAULT_POLICY, KIND_FILTER_ALIASES, ItemKind, RankingPolicy
from docindex_mcp.index.library import SearchIndex
from docindex_mcp.index.models import DisplayableMatch
from docindex_mcp.search.matching import MatchClass, classify_item, classify_signature

logger = logging.getLogger("docindex-mcp.search")

RankKey = tuple[int, int, int, int]

SIGNATURE_ARROW = "->"


@dataclass(frozen=True)
class ParsedQuery:
    """Normalized query text plus an optional kind filter.

    Type queries (``usize -> vec``, ``-> zip``) also carry the parameter and
    return type needles split out of ``text``.
    """

    text: str
    kind: ItemKind | None = None
    params: tuple[str, ...] = ()
    returns: str | None = None

    @property
    def is_signature(self) -> bool:
        return self.returns is not None

    @property
    def is_empty(self) -> bool:
        if self.is_signature:
            return not self.params and not self.returns
        return not self.text


def _split_signature(text: str, kind: ItemKind | None) -> ParsedQuery:
    inputs, _, output = text.partition(SIGNATURE_ARROW)
    params = tuple(part.strip() for part in inputs.split(",") if part.strip())
    return ParsedQuery(text=text, kind=kind, params=params, returns=output.strip())


def parse_query(query_text: str) -> ParsedQuery:
    """Trim, case-fold, split off a ``kind:`` filter prefix and any ``->`` types.

    Examples:
        >>> parse_query("  Fn:Enumerate ").kind, parse_query("  Fn:Enumerate ").text
        (<ItemKind.FUNCTION: 5>, 'enumerate')
        >>> parse_query("SuperIndex::enumerate").text
        'superindex::enumerate'
        >>> parse_query("Usize -> Vec").params, parse_query("Usize -> Vec").returns
        (('usize',), 'vec')
    """
    normalized = (query_text or "").strip().casefold()
    kind = None
    prefix, sep, rest = normalized.partition(":")
    if sep and not rest.startswith(":") and prefix.strip() in KIND_FILTER_ALIASES:
        kind = KIND_FILTER_ALIASES[prefix.strip()]
        normalized = rest.strip()
    if SIGNATURE_ARROW in normalized:
        return _split_signature(normalized, kind)
    return ParsedQuery(text=normalized, kind=kind)


class QueryEngine:
    """Stateless search over one or more SearchIndex handles.

    The only shared state touched during a search is each index's path
    resolver cache, which is write-once per item.

    Usage:
        >>> engine = QueryEngine()
        >>> [m.resolved_path for m in engine.search(index, "foo", 4)]
        ['demo::Foo', 'demo::FooBar', 'demo::FOO_LIMIT', 'demo::baz::BazFoo']
    """

    def __init__(self, policy: RankingPolicy | None = None) -> None:
        self.policy = policy or DEFAULT_POLICY

    def _candidates(self, index: SearchIndex, query: ParsedQuery, library_rank: int) -> Iterator[RankKey]:
        resolver = index.resolver
        for position, item in enumerate(index.catalog):
            if query.kind is not None and item.kind is not query.kind:
                continue
            keys = resolver.search_keys(position)
            if query.is_signature:
                match = classify_signature(query.params, query.returns, keys)
            else:
                match = classify_item(query.text, keys)
            if match is MatchClass.NO_MATCH:
                continue
            yield (int(match), self.policy.priority(item.kind), library_rank, position)

    def search(self, index: SearchIndex | None, query_text: str, max_results: int) -> tuple[DisplayableMatch, ...]:
        """Ranked matches for ``query_text`` in one index.

        Returns an empty tuple for an empty query or ``max_results <= 0``.

        Raises:
            NotReady: ``index`` is None (nothing has been loaded yet)
        """
        if index is None:
            raise NotReady("search called before an index was loaded")
        return self.search_many([index], query_text, max_results)

    def search_many(
        self,
        indexes: Iterable[SearchIndex | None],
        query_text: str,
        max_results: int,
    ) -> tuple[DisplayableMatch, ...]:
        """Ranked matches merged across several indexes.

        Library order (as given) breaks ties between equally ranked items of
        different libraries, before catalog position.
        """
        libraries = list(indexes)
        if not libraries or any(index is None for index in libraries):
            raise NotReady("search called before an index was loaded")

        query = parse_query(query_text)
        if query.is_empty or max_results <= 0:
            return ()

        candidates = (
            key
            for library_rank, index in enumerate(libraries)
            for key in self._candidates(index, query, library_rank)
        )
        ranked = heapq.nsmallest(max_results, candidates)
        logger.debug("Query %r (kind=%s): %d results", query.text, query.kind, len(ranked))
        return tuple(libraries[library_rank].to_match(position) for _, _, library_rank, position in ranked)


def search(
    index: SearchIndex | None,
    query_text: str,
    max_results: int,
    *,
    policy: RankingPolicy | None = None,
) -> tuple[DisplayableMatch, ...]:
    """Search one index with the given (or default) kind-priority policy."""
    return QueryEngine(policy).search(index, query_text, max_results)


def search_many(
    indexes: Iterable[SearchIndex | None],
    query_text: str,
    max_results: int,
    *,
    policy: RankingPolicy | None = None,
) -> tuple[DisplayableMatch, ...]:
    """Search several indexes and merge their rankings."""
    return QueryEngine(policy).search_many(indexes, query_text, max_results)
