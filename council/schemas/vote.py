"""Schemas for votes, ballots and tallies."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from council.schemas.participant import CompanySeatRead

MAX_OPTION_LENGTH = 100


class VoteCreate(BaseModel):
    question: str = Field(..., min_length=1)
    options: list[str] = Field(..., min_length=2)

    @field_validator("question")
    @classmethod
    def _question_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("question must not be blank")
        return value

    @field_validator("options")
    @classmethod
    def _distinct_options(cls, value: list[str]) -> list[str]:
        cleaned = [option.strip() for option in value]
        if any(not option for option in cleaned):
            raise ValueError("options must not be blank")
        if any(len(option) > MAX_OPTION_LENGTH for option in cleaned):
            raise ValueError(f"options must be at most {MAX_OPTION_LENGTH} characters")
        if len(set(cleaned)) != len(cleaned):
            raise ValueError("options must be distinct")
        if len(cleaned) < 2:
            raise ValueError("at least two options are required")
        return cleaned


class VoteCastRequest(BaseModel):
    option: str = Field(..., min_length=1, max_length=MAX_OPTION_LENGTH)
    voting_for_company_id: int | None = None


class VoteResponseRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    vote_id: int
    user_id: int
    option: str
    voting_for_company_id: int | None = None
    cast_by_user_id: int | None = None
    created_at: datetime | None = None


class OptionResultRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    option: str
    count: int
    percentage: float


class VoteRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    agenda_item_id: int
    question: str
    options: list[str]
    is_open: bool
    created_by: int
    created_at: datetime | None = None
    closed_at: datetime | None = None


class VoteWithResults(VoteRead):
    results: list[OptionResultRead]
    total_votes: int
    user_vote: VoteResponseRead | None = None
    user_votes: list[VoteResponseRead] = Field(default_factory=list)


class VoteResultsRead(BaseModel):
    vote: VoteRead
    responses: list[VoteResponseRead]
    results: list[OptionResultRead]
    total_votes: int


class CompanyBallotRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    option: str
    voter_id: int
    voter_name: str
    is_proxy: bool
    cast_by_user_id: int | None = None
    voter_on_roster: bool


class CompanyVotesRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    company_id: int
    company_name: str
    votes: list[CompanyBallotRead]


class EnhancedVoteRead(VoteWithResults):
    companies_votes: list[CompanyVotesRead] = Field(default_factory=list)


class SectionVotesRead(BaseModel):
    votes: list[EnhancedVoteRead]
    votable_companies: list[CompanySeatRead]
    can_vote_for_companies: bool
    user_role: str


__all__ = [
    "CompanyBallotRead",
    "CompanyVotesRead",
    "EnhancedVoteRead",
    "OptionResultRead",
    "SectionVotesRead",
    "VoteCastRequest",
    "VoteCreate",
    "VoteRead",
    "VoteResponseRead",
    "VoteResultsRead",
    "VoteWithResults",
]
