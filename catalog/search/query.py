"""
Full-text query expressions for the search index.

A query string is parsed into a flat list of clauses, following a subset
of the Lucene query-string syntax:

- ``orwell george``: either term (the default operator is OR)
- ``orwell AND george``, ``+orwell +george``: both terms required
- ``orwell NOT george``, ``orwell -george``: exclude a term
- ``name:orwell``: term restricted to one field
- ``orw*``: prefix match, ``*``: every document
- ``"george orwell"``: all words of the phrase required

Text is analyzed into lower-cased word tokens both at index and at query
time, so matching is case-insensitive and ignores punctuation.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

# Field name under which every token of a document is indexed
ALL_FIELDS = "_all"

_TOKEN_RE = re.compile(r"\w+")
_QUERY_PART_RE = re.compile(r'[+\-!]?(?:\w+:)?"[^"]*"?|\S+')
_FIELD_RE = re.compile(r"^(\w+):(.*)$", re.DOTALL)


def analyze(value: Any) -> list[str]:
    """
    Split a field value into lower-cased word tokens.

    Example:
        >>> analyze("George Orwell, 1903")
        ['george', 'orwell', '1903']
    """
    if value is None:
        return []
    return _TOKEN_RE.findall(str(value).lower())


def index_terms(document: dict[str, Any]) -> dict[str, set[str]]:
    """
    Tokens of every field of a document, plus all of them under ALL_FIELDS.

    Args:
        document: JSON-compatible field values of one entity.

    Returns:
        Mapping of field name to the set of its tokens.
    """
    terms: dict[str, set[str]] = {}
    for name, value in document.items():
        tokens = set(analyze(value))
        if tokens:
            terms[name] = tokens
    terms[ALL_FIELDS] = set().union(*terms.values()) if terms else set()
    return terms


class Occur(str, Enum):
    SHOULD = "should"
    MUST = "must"
    MUST_NOT = "must_not"


@dataclass(frozen=True)
class TermQuery:
    """
    What a single clause matches.

    Attributes:
        field: Field to look in (ALL_FIELDS for any field).
        tokens: Tokens a document must all contain.
        prefix: Whether the last token only has to be a prefix.
        match_all: Whether the clause matches every document.
    """

    field: str = ALL_FIELDS
    tokens: tuple[str, ...] = ()
    prefix: bool = False
    match_all: bool = False


@dataclass(frozen=True)
class Clause:
    occur: Occur
    query: TermQuery


@dataclass(frozen=True)
class QueryExpression:
    raw: str
    clauses: tuple[Clause, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return not self.clauses

    def by_occur(self, occur: Occur) -> list[Clause]:
        return [clause for clause in self.clauses if clause.occur == occur]


class TermResolver(Protocol):
    """Index lookups needed to evaluate a QueryExpression."""

    async def ids_for(self, query: TermQuery) -> set[int]: ...

    async def all_ids(self) -> set[int]: ...


def _parse_term(text: str) -> TermQuery | None:
    field_name = ALL_FIELDS
    if match := _FIELD_RE.match(text):
        field_name, text = match.group(1).lower(), match.group(2)

    if text.startswith('"'):
        tokens = analyze(text.strip('"'))
        return TermQuery(field_name, tuple(tokens)) if tokens else None

    if text == "*":
        return TermQuery(field_name, match_all=True)

    prefix = text.endswith("*")
    tokens = analyze(text.rstrip("*"))
    if not tokens:
        return None
    return TermQuery(field_name, tuple(tokens), prefix=prefix)


def parse_query(raw: str) -> QueryExpression:
    """
    Parse a query string into a QueryExpression.

    Unknown syntax never raises: parts that contain no word characters
    are ignored, so a query made only of them matches nothing.

    Args:
        raw: Query string as sent by the client.

    Returns:
        The parsed expression.
    """
    clauses: list[Clause] = []
    next_occur: Occur | None = None

    for part in _QUERY_PART_RE.findall(raw or ""):
        if part in ("AND", "&&"):
            if clauses and clauses[-1].occur == Occur.SHOULD:
                clauses[-1] = Clause(Occur.MUST, clauses[-1].query)
            next_occur = Occur.MUST
            continue
        if part in ("OR", "||"):
            next_occur = None
            continue
        if part == "NOT":
            next_occur = Occur.MUST_NOT
            continue

        occur = next_occur or Occur.SHOULD
        next_occur = None
        if part[0] == "+":
            occur, part = Occur.MUST, part[1:]
        elif part[0] in "-!":
            occur, part = Occur.MUST_NOT, part[1:]

        term = _parse_term(part)
        if term is not None:
            clauses.append(Clause(occur, term))

    return QueryExpression(raw=raw, clauses=tuple(clauses))


async def evaluate(
    expression: QueryExpression, resolver: TermResolver
) -> dict[int, int]:
    """
    Find the documents matching an expression.

    Required clauses must all match; optional clauses are only required
    when there is no required clause, in which case at least one must
    match. Excluded clauses must not match. A purely negative query
    starts from every document.

    Args:
        expression: Parsed query.
        resolver: Index lookups.

    Returns:
        Mapping of matching document ID to its score, the number of
        positive clauses it matched.
    """
    if expression.is_empty:
        return {}

    positive: list[set[int]] = []
    must: list[set[int]] = []
    should: list[set[int]] = []
    must_not: list[set[int]] = []

    for clause in expression.clauses:
        ids = await resolver.ids_for(clause.query)
        if clause.occur == Occur.MUST_NOT:
            must_not.append(ids)
            continue
        positive.append(ids)
        (must if clause.occur == Occur.MUST else should).append(ids)

    if must:
        candidates = set.intersection(*must)
    elif should:
        candidates = set().union(*should)
    else:
        candidates = await resolver.all_ids()

    for excluded in must_not:
        candidates -= excluded

    return {
        doc_id: sum(1 for ids in positive if doc_id in ids)
        for doc_id in candidates
    }
