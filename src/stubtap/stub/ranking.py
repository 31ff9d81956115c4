"""
StubTap Closest Match Ranking

Diagnostics for lookups where no stub matched. Every candidate expectation
seen during the scan is scored by how much of it shows up in the rendered
payload, and the best one is named in the not-found message.

The score is a heuristic for humans reading the error; it never affects
which stub is served.
"""

from typing import Any, Dict, List, Optional

from .models import CloseMatch, LookupQuery


def render_value(value: Any) -> str:
    """Render a single value the way it appears in diagnostics."""
    if isinstance(value, bool):
        return 'true' if value else 'false'
    return str(value)


def render_fields(fields: Dict[str, Any]) -> str:
    """Render a field map as one `key: value` line per entry, wrapped in braces."""
    lines = ['{']
    for key, value in fields.items():
        lines.append(f"\t{key}: {render_value(value)}")
    lines.append('}')
    return '\n'.join(lines)


def fuzzy_match(source: str, target: str) -> bool:
    """
    Check whether source approximately occurs in target.

    Every character of source must appear in target in the same order,
    but any number of target characters may be skipped in between.

    Args:
        source: Text to look for
        target: Text to search in

    Returns:
        True if source is a subsequence of target
    """
    if len(source) > len(target):
        return False

    remaining = iter(target)
    return all(char in remaining for char in source)


def rank_match(rendered_query: str, expect: Dict[str, Any]) -> float:
    """
    Score an expectation against the rendered payload.

    Each expected entry can contribute two hits: one for its key (as
    "key:") and one for its value.

    Args:
        rendered_query: Output of render_fields() for the lookup payload
        expect: Candidate expectation mapping

    Returns:
        Rank between 0.0 and 1.0
    """
    if not expect:
        return 0.0

    occurrences = 0
    for key, value in expect.items():
        if fuzzy_match(f"{key}:", rendered_query):
            occurrences += 1

        if fuzzy_match(render_value(value), rendered_query):
            occurrences += 1

    return occurrences / (len(expect) * 2)


def closest_match(rendered_query: str, candidates: List[CloseMatch]) -> Optional[CloseMatch]:
    """
    Pick the candidate with the strictly highest rank.

    Ties, including the all-zero case, go to the earliest candidate.
    """
    if not candidates:
        return None

    best = candidates[0]
    best_rank = 0.0
    for candidate in candidates:
        rank = rank_match(rendered_query, candidate.expect)
        if rank > best_rank:
            best_rank = rank
            best = candidate

    return best


def stub_not_found_message(
    query: LookupQuery,
    candidates: List[CloseMatch],
    closest: Optional[CloseMatch] = None
) -> str:
    """
    Build the human-readable not-found message.

    Args:
        query: Lookup that failed
        candidates: Every CloseMatch collected during the scan
        closest: Pre-computed winner (computed from candidates if None)

    Returns:
        Multi-line message with the payload and, when any candidate
        exists, the closest match section
    """
    rendered_query = render_fields(query.data)
    message = (
        f"Can't find stub \n\nService: {query.service} \n\n"
        f"Method: {query.method} \n\nInput\n\n{rendered_query}"
    )

    if closest is None:
        closest = closest_match(rendered_query, candidates)
    if closest is None:
        return message

    return message + f"\n\nClosest Match \n\n{closest.rule}:{render_fields(closest.expect)}"
