"""Vote lifecycle and ballot casting, including proxy and staff-delegated casts."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from council.models import Company, Vote, VoteResponse, utcnow
from council.obs import VOTES_CLOSED_COUNTER, record_vote_cast, record_vote_rejection, start_span
from council.schemas.vote import VoteCreate
from council.services.agenda import get_agenda_item
from council.services.directory import get_company
from council.services.participants import (
    CompanySeat,
    proxy_seat_company_id,
    represented_companies,
    roster_user_ids,
)
from council.services.tallies import Ballot, CompanyVotes, VoteTally, company_breakdown, tally

logger = logging.getLogger(__name__)


class VoteError(RuntimeError):
    """Base exception for vote operations."""


class VoteNotFoundError(VoteError):
    """Raised when a vote identifier does not exist."""


class VoteClosedError(VoteError):
    """Raised when casting on a vote that is no longer open."""


class VoteAlreadyClosedError(VoteError):
    """Raised when closing a vote twice."""


class InvalidOptionError(VoteError):
    """Raised when the chosen option is not one of the vote's options."""


class AlreadyVotedError(VoteError):
    """Raised when the effective voter already has a response on the vote."""


class IneligibleCompanyError(VoteError):
    """Raised when staff cast for a company without a seat in the meeting."""


@dataclass(slots=True, frozen=True)
class CastContext:
    """Who a ballot is attributed to and on whose behalf it counts."""

    user_id: int
    voting_for_company_id: int | None
    cast_by_user_id: int | None
    mode: str

    @property
    def voter_key(self) -> str:
        if self.voting_for_company_id is not None:
            return f"company:{self.voting_for_company_id}"
        return f"user:{self.user_id}"


@dataclass(slots=True)
class VoteView:
    vote: Vote
    tally: VoteTally
    user_vote: VoteResponse | None = None
    user_votes: list[VoteResponse] = field(default_factory=list)
    companies_votes: list[CompanyVotes] = field(default_factory=list)


@dataclass(slots=True)
class SectionVotes:
    votes: list[VoteView]
    votable_companies: list[CompanySeat]
    can_vote_for_companies: bool
    user_role: str


def get_vote(session: Session, vote_id: int) -> Vote:
    vote = session.get(Vote, vote_id)
    if vote is None:
        raise VoteNotFoundError(f"Vote {vote_id} not found")
    return vote


def create_vote(session: Session, agenda_item_id: int, payload: VoteCreate, *, created_by: int) -> Vote:
    get_agenda_item(session, agenda_item_id)
    vote = Vote(
        agenda_item_id=agenda_item_id,
        question=payload.question,
        options=list(payload.options),
        is_open=True,
        created_by=created_by,
    )
    session.add(vote)
    session.commit()
    session.refresh(vote)
    logger.info("vote created", extra={"vote_id": vote.id, "agenda_item_id": agenda_item_id})
    return vote


def _resolve_cast(
    session: Session,
    *,
    meeting_id: int,
    caller_id: int,
    caller_is_staff: bool,
    voting_for_company_id: int | None,
) -> CastContext:
    if voting_for_company_id is not None and caller_is_staff:
        company = get_company(session, voting_for_company_id)
        seat = next(
            (seat for seat in represented_companies(session, meeting_id) if seat.company_id == company.id),
            None,
        )
        if seat is None:
            record_vote_rejection("ineligible_company")
            raise IneligibleCompanyError(f"Company {company.id} is not represented in this meeting")
        return CastContext(
            user_id=caller_id,
            voting_for_company_id=seat.company_id,
            cast_by_user_id=caller_id,
            mode="staff",
        )

    if voting_for_company_id is not None and voting_for_company_id == proxy_seat_company_id(
        session, meeting_id, caller_id
    ):
        return CastContext(
            user_id=caller_id,
            voting_for_company_id=voting_for_company_id,
            cast_by_user_id=None,
            mode="proxy",
        )
    return CastContext(user_id=caller_id, voting_for_company_id=None, cast_by_user_id=None, mode="self")


def cast_vote(
    session: Session,
    vote_id: int,
    *,
    option: str,
    caller_id: int,
    caller_is_staff: bool,
    voting_for_company_id: int | None = None,
) -> VoteResponse:
    """Record one ballot on an open vote.

    Each effective voter (a company when casting on its behalf, otherwise
    the user) gets at most one response per vote; a second cast is refused
    rather than overwriting the first.
    """

    with start_span(
        "vote.cast", vote_id=vote_id, caller_id=caller_id, voting_for_company_id=voting_for_company_id
    ) as span:
        response = _record_cast(
            session,
            vote_id,
            option=option,
            caller_id=caller_id,
            caller_is_staff=caller_is_staff,
            voting_for_company_id=voting_for_company_id,
        )
        span.set_attribute("council.response_id", response.id)
    return response


def _record_cast(
    session: Session,
    vote_id: int,
    *,
    option: str,
    caller_id: int,
    caller_is_staff: bool,
    voting_for_company_id: int | None,
) -> VoteResponse:
    vote = get_vote(session, vote_id)
    if not vote.is_open:
        record_vote_rejection("closed")
        raise VoteClosedError("Vote is closed")
    if option not in vote.options:
        record_vote_rejection("invalid_option")
        raise InvalidOptionError(f"Option '{option}' is not available on this vote")

    context = _resolve_cast(
        session,
        meeting_id=vote.agenda_item.meeting_id,
        caller_id=caller_id,
        caller_is_staff=caller_is_staff,
        voting_for_company_id=voting_for_company_id,
    )

    existing = session.scalars(
        select(VoteResponse.id).where(
            VoteResponse.vote_id == vote.id, VoteResponse.voter_key == context.voter_key
        )
    ).first()
    if existing is not None:
        record_vote_rejection("already_voted")
        raise AlreadyVotedError("A vote has already been recorded for this voter")

    response = VoteResponse(
        vote_id=vote.id,
        user_id=context.user_id,
        option=option,
        voting_for_company_id=context.voting_for_company_id,
        cast_by_user_id=context.cast_by_user_id,
        voter_key=context.voter_key,
    )
    session.add(response)
    try:
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        record_vote_rejection("already_voted")
        raise AlreadyVotedError("A vote has already been recorded for this voter") from exc
    session.refresh(response)

    record_vote_cast(context.mode)
    logger.info(
        "vote cast",
        extra={
            "vote_id": vote_id,
            "user_id": context.user_id,
            "voting_for_company_id": context.voting_for_company_id,
            "cast_by_user_id": context.cast_by_user_id,
            "mode": context.mode,
        },
    )
    return response


def close_vote(session: Session, vote_id: int) -> Vote:
    """Close an open vote; ``closed_at`` is written exactly once."""

    with start_span("vote.close", vote_id=vote_id):
        result = session.execute(
            update(Vote)
            .where(Vote.id == vote_id, Vote.is_open.is_(True))
            .values(is_open=False, closed_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            session.rollback()
            get_vote(session, vote_id)
            raise VoteAlreadyClosedError("Vote is already closed")
        session.commit()
    vote = get_vote(session, vote_id)
    session.refresh(vote)
    VOTES_CLOSED_COUNTER.inc()
    logger.info("vote closed", extra={"vote_id": vote_id})
    return vote


def delete_vote(session: Session, vote_id: int) -> None:
    vote = get_vote(session, vote_id)
    session.delete(vote)
    session.commit()
    logger.info("vote deleted", extra={"vote_id": vote_id})


def tally_vote(vote: Vote) -> VoteTally:
    return tally(vote.options, (response.option for response in vote.responses))


def _ballots(vote: Vote) -> list[Ballot]:
    return [
        Ballot(
            option=response.option,
            voter_id=response.user_id,
            voter_name=response.user.display_name,
            voter_company_id=response.user.company_id,
            voting_for_company_id=response.voting_for_company_id,
            cast_by_user_id=response.cast_by_user_id,
        )
        for response in vote.responses
    ]


def _company_names(session: Session, ballots: list[Ballot]) -> dict[int, str]:
    company_ids = {ballot.voting_for_company_id for ballot in ballots} | {
        ballot.voter_company_id for ballot in ballots
    }
    company_ids.discard(None)
    if not company_ids:
        return {}
    rows = session.execute(select(Company.id, Company.name).where(Company.id.in_(company_ids)))
    return {company_id: name for company_id, name in rows}


def _view(vote: Vote, viewer_id: int) -> VoteView:
    personal_key = f"user:{viewer_id}"
    return VoteView(
        vote=vote,
        tally=tally_vote(vote),
        user_vote=next((r for r in vote.responses if r.voter_key == personal_key), None),
        user_votes=[
            r for r in vote.responses if r.user_id == viewer_id or r.cast_by_user_id == viewer_id
        ],
    )


def _votes_for_item(session: Session, agenda_item_id: int) -> list[Vote]:
    get_agenda_item(session, agenda_item_id)
    statement = (
        select(Vote)
        .where(Vote.agenda_item_id == agenda_item_id)
        .order_by(Vote.created_at.desc(), Vote.id.desc())
    )
    return list(session.scalars(statement))


def list_votes_for_agenda_item(session: Session, agenda_item_id: int, *, viewer_id: int) -> list[VoteView]:
    return [_view(vote, viewer_id) for vote in _votes_for_item(session, agenda_item_id)]


def vote_results(session: Session, vote_id: int) -> tuple[Vote, VoteTally]:
    vote = get_vote(session, vote_id)
    return vote, tally_vote(vote)


def section_votes(
    session: Session,
    agenda_item_id: int,
    *,
    viewer_id: int,
    viewer_role: str,
    viewer_is_staff: bool,
) -> SectionVotes:
    """Votes of an agenda item with per-company breakdowns and the viewer's casting options."""

    item = get_agenda_item(session, agenda_item_id)
    roster = roster_user_ids(session, item.meeting_id)
    views = []
    for vote in _votes_for_item(session, agenda_item_id):
        view = _view(vote, viewer_id)
        ballots = _ballots(vote)
        view.companies_votes = company_breakdown(ballots, _company_names(session, ballots), roster)
        views.append(view)
    return SectionVotes(
        votes=views,
        votable_companies=represented_companies(session, item.meeting_id),
        can_vote_for_companies=viewer_is_staff,
        user_role=viewer_role,
    )


__all__ = [
    "AlreadyVotedError",
    "CastContext",
    "IneligibleCompanyError",
    "InvalidOptionError",
    "SectionVotes",
    "VoteAlreadyClosedError",
    "VoteClosedError",
    "VoteError",
    "VoteNotFoundError",
    "VoteView",
    "cast_vote",
    "close_vote",
    "create_vote",
    "delete_vote",
    "get_vote",
    "list_votes_for_agenda_item",
    "section_votes",
    "tally_vote",
    "vote_results",
]
