"""Member filtering and name search for the address book."""

from dataclasses import dataclass

import jellyfish
from rapidfuzz import fuzz, process

from .constants import ALL
from .models import Member


@dataclass
class FilterCriteria:
    search_term: str = ""
    state: str = ALL
    district: str = ALL
    has_children: str = ALL  # "all" | "yes" | "no"


def _matches_search(member: Member, term: str) -> bool:
    term_lower = term.lower()
    return (
        term_lower in (member.name or "").lower()
        or term_lower in (member.spouse_name or "").lower()
        or term_lower in (member.city or "").lower()
        or term in (member.contact_number or "")
    )


def _matches_children(member: Member, has_children: str) -> bool:
    if has_children == "yes":
        return bool(member.children)
    if has_children == "no":
        return not member.children
    return True


def apply_filters(members: list[Member], criteria: FilterCriteria) -> list[Member]:
    """Filter members by all criteria, preserving input order.

    The search term matches name, spouse name or city case-insensitively, or
    the contact number as an exact substring.
    """
    results = []
    for member in members:
        if criteria.search_term and not _matches_search(member, criteria.search_term):
            continue
        if criteria.state != ALL and member.state != criteria.state:
            continue
        if criteria.district != ALL and member.district != criteria.district:
            continue
        if not _matches_children(member, criteria.has_children):
            continue
        results.append(member)
    return results


def unique_states(members: list[Member]) -> list[str]:
    """Distinct non-empty states in first-seen order."""
    return list(dict.fromkeys(m.state for m in members if m.state))


def unique_districts(members: list[Member]) -> list[str]:
    """Distinct non-empty districts in first-seen order."""
    return list(dict.fromkeys(m.district for m in members if m.district))


def _phonetic_code(name: str) -> str:
    words = name.split()
    return jellyfish.metaphone(words[0]) if words else ""


def fuzzy_search_members(
    members: list[Member], query: str, threshold: int = 70, max_results: int = 20
) -> list[dict]:
    """Typo-tolerant name search.

    Combines fuzzy string matching on names with Metaphone matching on the
    first name. Results are sorted by score descending.
    """
    query = query.strip()
    if not query or not members:
        return []

    scores: dict[str, float] = {}

    names = [m.name for m in members]
    for _, score, index in process.extract(
        query,
        names,
        scorer=fuzz.WRatio,
        limit=None,
        score_cutoff=threshold,
    ):
        member_id = members[index].id
        scores[member_id] = max(scores.get(member_id, 0.0), float(score))

    query_code = _phonetic_code(query)
    if query_code:
        for member in members:
            if member.id not in scores and _phonetic_code(member.name) == query_code:
                scores[member.id] = 60.0  # Base score for phonetic match

    by_id = {m.id: m for m in members}
    results = []
    for member_id, score in sorted(scores.items(), key=lambda x: -x[1]):
        info = by_id[member_id].to_summary()
        info["match_score"] = score
        results.append(info)
        if len(results) >= max_results:
            break
    return results
