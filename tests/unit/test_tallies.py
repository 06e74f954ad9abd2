from __future__ import annotations

from council.services.tallies import Ballot, company_breakdown, percentage, tally


def test_tally_counts_declared_options_in_order() -> None:
    result = tally(["Oui", "Non", "Abstention"], ["Oui", "Oui", "Non"])

    assert result.total_votes == 3
    assert [(r.option, r.count, r.percentage) for r in result.results] == [
        ("Oui", 2, 66.7),
        ("Non", 1, 33.3),
        ("Abstention", 0, 0.0),
    ]


def test_tally_without_responses_reports_zero_percentages() -> None:
    result = tally(["Pour", "Contre"], [])

    assert result.total_votes == 0
    assert all(r.count == 0 and r.percentage == 0.0 for r in result.results)


def test_tally_ignores_undeclared_options() -> None:
    result = tally(["A", "B"], ["A", "Z", "B", "B"])

    assert result.total_votes == 3
    assert sum(r.count for r in result.results) == result.total_votes
    assert [r.count for r in result.results] == [1, 2]


def test_percentage_rounds_half_up() -> None:
    assert percentage(1, 16) == 6.3
    assert percentage(1, 8) == 12.5
    assert percentage(0, 0) == 0.0


def _ballot(option: str, voter_id: int, company_id: int | None, **kwargs) -> Ballot:
    return Ballot(
        option=option,
        voter_id=voter_id,
        voter_name=f"Voter {voter_id}",
        voter_company_id=company_id,
        **kwargs,
    )


def test_company_breakdown_groups_by_counted_company() -> None:
    ballots = [
        _ballot("Oui", 1, 10),
        _ballot("Non", 2, 20, voting_for_company_id=30),
        _ballot("Oui", 3, 20),
        _ballot("Oui", 4, None),
    ]

    groups = company_breakdown(ballots, {10: "Beta", 20: "Alpha", 30: "Gamma"}, roster_user_ids=[1, 2, 3])

    assert [(g.company_id, g.company_name) for g in groups] == [(20, "Alpha"), (10, "Beta"), (30, "Gamma")]
    gamma = groups[2]
    assert gamma.votes[0].voter_id == 2
    assert gamma.votes[0].is_proxy is True
    alpha = groups[0]
    assert alpha.votes[0].is_proxy is False
    assert all(ballot.voter_id != 4 for group in groups for ballot in group.votes)


def test_company_breakdown_flags_voters_no_longer_on_roster() -> None:
    ballots = [_ballot("Oui", 1, 10), _ballot("Non", 2, 10, cast_by_user_id=9)]

    (group,) = company_breakdown(ballots, {10: "Acme"}, roster_user_ids=[1])

    assert [b.voter_on_roster for b in group.votes] == [True, False]
    assert group.votes[1].cast_by_user_id == 9
    assert [b.option for b in group.votes] == ["Oui", "Non"]


def test_staff_ballot_counts_as_proxy_for_the_company() -> None:
    ballots = [
        _ballot("Oui", 1, 10),
        _ballot("Non", 9, None, voting_for_company_id=10, cast_by_user_id=9),
    ]

    (group,) = company_breakdown(ballots, {10: "Acme"}, roster_user_ids=[1])

    assert [(b.voter_id, b.option, b.is_proxy) for b in group.votes] == [(1, "Oui", False), (9, "Non", True)]
    assert group.votes[1].voter_on_roster is True
