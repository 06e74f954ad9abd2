"""Seed script for a demo company, a salaried administrator and a council member."""
from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from council.core.config import get_settings
from council.db.session import get_session
from council.models import PERMISSION_FLAGS, Company, MeetingType, User, UserRole
from council.services.sessions import hash_password

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

DEMO_SIRET = "12345678900012"


def seed(session: Session) -> None:
    """Create the demo records that are missing; existing rows are left untouched."""

    settings = get_settings()

    company = session.scalars(select(Company).where(Company.siret == DEMO_SIRET)).first()
    if company is None:
        company = Company(name="Entreprise Démo", siret=DEMO_SIRET, sector="Services")
        session.add(company)
        session.flush()
        logger.info("Created company %s", company.name)
    else:
        logger.info("Company %s already exists", company.name)

    if session.scalars(select(MeetingType).where(MeetingType.name == "Conseil national")).first() is None:
        session.add(MeetingType(name="Conseil national", description="Réunion plénière du conseil"))
        logger.info("Created meeting type Conseil national")

    existing_users = set(session.scalars(select(User.email)))
    seed_users = [
        (
            settings.seed_admin_email,
            "Admin",
            "Council",
            UserRole.SALARIED,
            None,
            {flag: True for flag in PERMISSION_FLAGS},
        ),
        (
            "member@council.local",
            "Camille",
            "Martin",
            UserRole.COUNCIL_MEMBER,
            company.id,
            {"can_vote": True, "can_see_vote_results": True},
        ),
    ]

    for email, first_name, last_name, role, company_id, permissions in seed_users:
        if email in existing_users:
            logger.info("User %s already exists", email)
            continue
        session.add(
            User(
                email=email,
                first_name=first_name,
                last_name=last_name,
                role=role.value,
                company_id=company_id,
                permissions=permissions,
                hashed_password=hash_password(settings.seed_admin_password),
            )
        )
        logger.info("Added user %s", email)


def main() -> None:
    with get_session() as session:
        seed(session)


if __name__ == "__main__":
    main()
