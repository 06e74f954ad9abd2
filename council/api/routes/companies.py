"""Company directory endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from council.api.deps import get_db_session
from council.api.routes.auth import AuthenticatedUser, get_current_user, require_permission
from council.schemas.company import CompanyCreate, CompanyRead, CompanyUpdate
from council.services import directory

router = APIRouter(prefix="/companies")


def _http_error(exc: directory.DirectoryError) -> HTTPException:
    if isinstance(exc, directory.DuplicateCompanyError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


@router.get("", response_model=list[CompanyRead])
def list_companies(
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(get_current_user),
) -> list[CompanyRead]:
    return [CompanyRead.model_validate(company) for company in directory.list_companies(session)]


@router.post("", response_model=CompanyRead, status_code=status.HTTP_201_CREATED)
def create_company(
    payload: CompanyCreate,
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(require_permission("can_manage_users")),
) -> CompanyRead:
    try:
        company = directory.create_company(session, payload)
    except directory.DirectoryError as exc:
        raise _http_error(exc) from exc
    return CompanyRead.model_validate(company)


@router.get("/{company_id}", response_model=CompanyRead)
def get_company(
    company_id: int,
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(get_current_user),
) -> CompanyRead:
    try:
        company = directory.get_company(session, company_id)
    except directory.DirectoryError as exc:
        raise _http_error(exc) from exc
    return CompanyRead.model_validate(company)


@router.put("/{company_id}", response_model=CompanyRead)
def update_company(
    company_id: int,
    payload: CompanyUpdate,
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(require_permission("can_manage_users")),
) -> CompanyRead:
    try:
        company = directory.update_company(session, company_id, payload)
    except directory.DirectoryError as exc:
        raise _http_error(exc) from exc
    return CompanyRead.model_validate(company)


@router.delete("/{company_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_company(
    company_id: int,
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(require_permission("can_manage_users")),
) -> Response:
    try:
        directory.delete_company(session, company_id)
    except directory.DirectoryError as exc:
        raise _http_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


__all__ = ["router"]
