"""Top level API router registration."""
from fastapi import APIRouter, FastAPI

from council.api.routes import (
    agenda,
    auth,
    companies,
    health,
    meeting_types,
    meetings,
    participants,
    users,
    votes,
)


def register_routes(application: FastAPI) -> None:
    """Register all API routers with the FastAPI application."""
    api_router = APIRouter(prefix="/api")

    api_router.include_router(health.router, tags=["health"])
    api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
    api_router.include_router(companies.router, tags=["companies"])
    api_router.include_router(users.router, tags=["users"])
    api_router.include_router(meetings.router, tags=["meetings"])
    api_router.include_router(participants.router, tags=["participants"])
    api_router.include_router(agenda.router, tags=["agenda"])
    api_router.include_router(votes.router, tags=["votes"])
    api_router.include_router(meeting_types.router, tags=["meeting-types"])

    application.include_router(api_router)


__all__ = ["register_routes"]
