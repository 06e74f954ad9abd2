"""Read-time vote aggregation: per-option tallies and per-company breakdowns."""
from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal


@dataclass(frozen=True, slots=True)
class OptionResult:
    option: str
    count: int
    percentage: float


@dataclass(frozen=True, slots=True)
class VoteTally:
    results: list[OptionResult]
    total_votes: int


@dataclass(frozen=True, slots=True)
class Ballot:
    """Flattened view of one response, detached from the ORM."""

    option: str
    voter_id: int
    voter_name: str
    voter_company_id: int | None
    voting_for_company_id: int | None = None
    cast_by_user_id: int | None = None


@dataclass(frozen=True, slots=True)
class CompanyBallot:
    option: str
    voter_id: int
    voter_name: str
    is_proxy: bool
    cast_by_user_id: int | None
    voter_on_roster: bool


@dataclass(slots=True)
class CompanyVotes:
    company_id: int
    company_name: str
    votes: list[CompanyBallot] = field(default_factory=list)


def percentage(count: int, total: int) -> float:
    """Return ``count`` as a share of ``total`` rounded half-up to one decimal."""

    if total <= 0:
        return 0.0
    share = Decimal(count) * Decimal(100) / Decimal(total)
    return float(share.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def tally(options: Iterable[str], chosen_options: Iterable[str]) -> VoteTally:
    """Count responses per declared option, keeping declared order and zero counts.

    Responses naming an option that is not declared are ignored, so
    ``total_votes`` always equals the sum of the reported counts.
    """

    declared = list(dict.fromkeys(options))
    counts = dict.fromkeys(declared, 0)
    for chosen in chosen_options:
        if chosen in counts:
            counts[chosen] += 1

    total = sum(counts.values())
    results = [
        OptionResult(option=option, count=counts[option], percentage=percentage(counts[option], total))
        for option in declared
    ]
    return VoteTally(results=results, total_votes=total)


def company_breakdown(
    ballots: Iterable[Ballot],
    company_names: Mapping[int, str],
    roster_user_ids: Iterable[int],
) -> list[CompanyVotes]:
    """Group ballots by the company they count for.

    A ballot counts for ``voting_for_company_id`` when set, otherwise for the
    voter's own company. Ballots with neither are not attributed to any
    company and are left out. Ballots a staff member registered on a
    company's behalf are never flagged off-roster.
    """

    roster = set(roster_user_ids)
    groups: dict[int, CompanyVotes] = {}
    for ballot in ballots:
        company_id = ballot.voting_for_company_id or ballot.voter_company_id
        if company_id is None:
            continue
        group = groups.get(company_id)
        if group is None:
            group = CompanyVotes(
                company_id=company_id,
                company_name=company_names.get(company_id, f"#{company_id}"),
            )
            groups[company_id] = group
        group.votes.append(
            CompanyBallot(
                option=ballot.option,
                voter_id=ballot.voter_id,
                voter_name=ballot.voter_name,
                is_proxy=company_id != ballot.voter_company_id,
                cast_by_user_id=ballot.cast_by_user_id,
                voter_on_roster=ballot.voter_id in roster or ballot.cast_by_user_id == ballot.voter_id,
            )
        )

    return sorted(groups.values(), key=lambda group: (group.company_name, group.company_id))


__all__ = [
    "Ballot",
    "CompanyBallot",
    "CompanyVotes",
    "OptionResult",
    "VoteTally",
    "company_breakdown",
    "percentage",
    "tally",
]
