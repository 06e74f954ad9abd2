"""Vote endpoints: creation, casting, closing and results."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from council.api.deps import get_db_session
from council.api.routes.auth import AuthenticatedUser, get_current_user, require_permission
from council.schemas.participant import CompanySeatRead
from council.schemas.vote import (
    CompanyVotesRead,
    EnhancedVoteRead,
    OptionResultRead,
    SectionVotesRead,
    VoteCastRequest,
    VoteCreate,
    VoteRead,
    VoteResponseRead,
    VoteResultsRead,
    VoteWithResults,
)
from council.services import agenda, directory, votes

router = APIRouter()


def _http_error(exc: Exception) -> HTTPException:
    if isinstance(exc, (votes.AlreadyVotedError, votes.VoteClosedError, votes.VoteAlreadyClosedError)):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    if isinstance(exc, votes.InvalidOptionError):
        return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    if isinstance(exc, votes.IneligibleCompanyError):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc))
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


def _with_results(view: votes.VoteView) -> dict:
    return {
        **VoteRead.model_validate(view.vote).model_dump(),
        "results": [OptionResultRead.model_validate(result) for result in view.tally.results],
        "total_votes": view.tally.total_votes,
        "user_vote": VoteResponseRead.model_validate(view.user_vote) if view.user_vote else None,
        "user_votes": [VoteResponseRead.model_validate(response) for response in view.user_votes],
    }


@router.get("/agenda/{item_id}/votes", response_model=list[VoteWithResults])
def list_votes(
    item_id: int,
    session: Session = Depends(get_db_session),
    user: AuthenticatedUser = Depends(get_current_user),
) -> list[VoteWithResults]:
    try:
        views = votes.list_votes_for_agenda_item(session, item_id, viewer_id=user.user_id)
    except agenda.AgendaError as exc:
        raise _http_error(exc) from exc
    return [VoteWithResults(**_with_results(view)) for view in views]


@router.post("/agenda/{item_id}/votes", response_model=VoteRead, status_code=status.HTTP_201_CREATED)
def create_vote(
    item_id: int,
    payload: VoteCreate,
    session: Session = Depends(get_db_session),
    user: AuthenticatedUser = Depends(require_permission("can_manage_agenda")),
) -> VoteRead:
    try:
        vote = votes.create_vote(session, item_id, payload, created_by=user.user_id)
    except agenda.AgendaError as exc:
        raise _http_error(exc) from exc
    return VoteRead.model_validate(vote)


@router.post("/votes/{vote_id}/cast", response_model=VoteResponseRead, status_code=status.HTTP_201_CREATED)
def cast_vote(
    vote_id: int,
    payload: VoteCastRequest,
    session: Session = Depends(get_db_session),
    user: AuthenticatedUser = Depends(require_permission("can_vote")),
) -> VoteResponseRead:
    try:
        response = votes.cast_vote(
            session,
            vote_id,
            option=payload.option,
            caller_id=user.user_id,
            caller_is_staff=user.is_staff,
            voting_for_company_id=payload.voting_for_company_id,
        )
    except (votes.VoteError, directory.DirectoryError) as exc:
        raise _http_error(exc) from exc
    return VoteResponseRead.model_validate(response)


@router.post("/votes/{vote_id}/close", response_model=VoteRead)
@router.put("/votes/{vote_id}/close", response_model=VoteRead, include_in_schema=False)
def close_vote(
    vote_id: int,
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(require_permission("can_manage_agenda")),
) -> VoteRead:
    try:
        vote = votes.close_vote(session, vote_id)
    except votes.VoteError as exc:
        raise _http_error(exc) from exc
    return VoteRead.model_validate(vote)


@router.delete("/votes/{vote_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_vote(
    vote_id: int,
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(require_permission("can_manage_agenda")),
) -> Response:
    try:
        votes.delete_vote(session, vote_id)
    except votes.VoteError as exc:
        raise _http_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/votes/{vote_id}/results", response_model=VoteResultsRead)
def vote_results(
    vote_id: int,
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(require_permission("can_see_vote_results")),
) -> VoteResultsRead:
    try:
        vote, tally = votes.vote_results(session, vote_id)
    except votes.VoteError as exc:
        raise _http_error(exc) from exc
    return VoteResultsRead(
        vote=VoteRead.model_validate(vote),
        responses=[VoteResponseRead.model_validate(response) for response in vote.responses],
        results=[OptionResultRead.model_validate(result) for result in tally.results],
        total_votes=tally.total_votes,
    )


@router.get("/sections/{item_id}/votes/enhanced", response_model=SectionVotesRead)
def section_votes(
    item_id: int,
    session: Session = Depends(get_db_session),
    user: AuthenticatedUser = Depends(get_current_user),
) -> SectionVotesRead:
    try:
        section = votes.section_votes(
            session,
            item_id,
            viewer_id=user.user_id,
            viewer_role=user.role,
            viewer_is_staff=user.is_staff,
        )
    except agenda.AgendaError as exc:
        raise _http_error(exc) from exc
    return SectionVotesRead(
        votes=[
            EnhancedVoteRead(
                **_with_results(view),
                companies_votes=[CompanyVotesRead.model_validate(group) for group in view.companies_votes],
            )
            for view in section.votes
        ],
        votable_companies=[CompanySeatRead.model_validate(seat) for seat in section.votable_companies],
        can_vote_for_companies=section.can_vote_for_companies,
        user_role=section.user_role,
    )


__all__ = ["router"]
