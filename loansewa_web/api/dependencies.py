"""Dependency injection for page routes"""

from fastapi import Depends, Request

from loansewa_web.domain.exceptions import SessionRequired
from loansewa_web.domain.session import SessionContext
from loansewa_web.infrastructure.clients.backend import LoanSewaClient
from loansewa_web.infrastructure.clients.schemas import Identity


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_backend_client() -> LoanSewaClient:
    """Provide backend API client instance"""
    return LoanSewaClient()


def get_session(request: Request) -> SessionContext:
    """Provide the browser session context"""
    return SessionContext(request.session)


def require_user(session: SessionContext = Depends(get_session)) -> Identity:
    """Signed-in borrower, or redirect to /login before any backend call"""
    user = session.user
    if user is None:
        raise SessionRequired("/login", area="user")
    return user


def require_admin(session: SessionContext = Depends(get_session)) -> Identity:
    """Signed-in admin, or redirect to /admin/login before any backend call"""
    admin = session.admin
    if admin is None:
        raise SessionRequired("/admin/login", area="admin")
    return admin
