"""Admin panel: authentication, review queue, history, insights and user management"""

import asyncio
import logging
import uuid
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Form, Request, Response
from fastapi.responses import RedirectResponse

from loansewa_web.api.dependencies import get_backend_client, get_request_id, get_session, require_admin
from loansewa_web.api.templating import render
from loansewa_web.domain import charts, trends
from loansewa_web.domain.exceptions import BackendAPIError
from loansewa_web.domain.models import ChartPoint
from loansewa_web.domain.session import SessionContext
from loansewa_web.infrastructure.clients.backend import LoanSewaClient
from loansewa_web.infrastructure.clients.generations import history_generations
from loansewa_web.infrastructure.clients.schemas import DashboardStats, Identity, Insights
from loansewa_web.infrastructure.observability.logging import log_admin_action
from loansewa_web.infrastructure.observability.metrics import record_admin_action
from loansewa_web.utils.formatting import format_lakhs

router = APIRouter(prefix="/admin")

TABS = ("dashboard", "history", "insights", "settings")

RISK_COLORS = {"Low": "#4caf50", "Medium": "#ff9800", "High": "#f44336"}


@router.get("/login")
def login_page(request: Request, session: SessionContext = Depends(get_session)):
    if session.admin is not None:
        return RedirectResponse("/admin/dashboard", status_code=303)
    return render(request, "admin/login.html", {"email": "", "error": ""})


@router.post("/login")
async def login(
    request: Request,
    email: str = Form(...),
    password: str = Form(...),
    session: SessionContext = Depends(get_session),
    client: LoanSewaClient = Depends(get_backend_client),
):
    try:
        admin = await client.admin_login(email, password)
    except BackendAPIError as e:
        return render(request, "admin/login.html", {"email": email, "error": e.message}, status_code=401)

    session.sign_in_admin(admin)
    return RedirectResponse("/admin/dashboard", status_code=303)


@router.get("/signup")
def signup_page(request: Request):
    return render(request, "admin/signup.html", {"form": {}, "error": ""})


@router.post("/signup")
async def signup(
    request: Request,
    full_name: str = Form(...),
    email: str = Form(...),
    mobile_number: str = Form(...),
    password: str = Form(...),
    confirm_password: str = Form(...),
    session: SessionContext = Depends(get_session),
    client: LoanSewaClient = Depends(get_backend_client),
):
    form = {"full_name": full_name, "email": email, "mobile_number": mobile_number}

    if password != confirm_password:
        return render(request, "admin/signup.html", {"form": form, "error": "Passwords do not match"}, status_code=400)

    try:
        admin = await client.admin_signup({**form, "password": password, "confirm_password": confirm_password})
    except BackendAPIError as e:
        return render(request, "admin/signup.html", {"form": form, "error": e.message}, status_code=400)

    session.sign_in_admin(admin)
    return RedirectResponse("/admin/dashboard", status_code=303)


@router.post("/logout")
def logout(session: SessionContext = Depends(get_session)):
    session.sign_out_admin()
    return RedirectResponse("/admin/login", status_code=303)


def _parse_date(value: str) -> Optional[date]:
    try:
        return date.fromisoformat(value) if value else None
    except ValueError:
        return None


def risk_slices(insights: Insights):
    risk = insights.risk_distribution
    return charts.pie_slices(
        [
            ("Low", risk.low_risk, RISK_COLORS["Low"]),
            ("Medium", risk.medium_risk, RISK_COLORS["Medium"]),
            ("High", risk.high_risk, RISK_COLORS["High"]),
        ]
    )


def repayment_slices(insights: Insights):
    """Repaid and outstanding shares of the disbursed total"""
    money = insights.disbursed_vs_repaid
    return charts.pie_slices(
        [
            ("Repaid", money.total_repaid, "#4caf50"),
            ("Outstanding", money.outstanding, "#2196f3"),
        ],
        total=money.total_disbursed,
    )


def _distribution_bars(distribution: dict, color: str):
    points = [ChartPoint(label=label, value=count, formatted_date="") for label, count in distribution.items()]
    return charts.bar_chart(points, floor=1, color=color, caption=lambda p: str(int(p.value)))


@router.get("/dashboard")
async def dashboard(
    request: Request,
    tab: str = "dashboard",
    status: str = "",
    start_date: str = "",
    end_date: str = "",
    search: str = "",
    admin: Identity = Depends(require_admin),
    client: LoanSewaClient = Depends(get_backend_client),
    request_id: str = Depends(get_request_id),
):
    """Admin panel; every tab refetches from the backend on load"""
    if tab not in TABS:
        tab = "dashboard"

    stats, insights = DashboardStats(), Insights()
    pending, users, history = [], [], []
    errors = []

    results = await asyncio.gather(
        client.get_dashboard_stats(),
        client.get_pending_applications(),
        client.list_users(),
        client.get_insights(),
        return_exceptions=True,
    )
    for result in results:
        if isinstance(result, BackendAPIError):
            logging.error(f"Error fetching data: {result.message}", extra={"request_id": request_id})
            errors.append(result.message)
        elif isinstance(result, BaseException):
            raise result
    stats_res, pending_res, users_res, insights_res = results
    if isinstance(stats_res, DashboardStats):
        stats = stats_res
    if isinstance(pending_res, list):
        pending = pending_res
    if isinstance(users_res, list):
        users = users_res
    if isinstance(insights_res, Insights):
        insights = insights_res

    filters = {"status": status, "start_date": start_date, "end_date": end_date, "search": search}
    context = {
        "admin": admin,
        "tab": tab,
        "stats": stats,
        "pending": pending,
        "users": users,
        "insights": insights,
        "filters": filters,
        "errors": errors,
    }

    if tab == "history":
        context["view_id"] = uuid.uuid4().hex
        try:
            history = await client.get_application_history(
                status, _parse_date(start_date), _parse_date(end_date), search
            )
        except BackendAPIError as e:
            logging.error(f"Error fetching history: {e.message}", extra={"request_id": request_id})
            errors.append(e.message)
        context["history"] = history

    if tab == "insights":
        try:
            all_history = await client.get_application_history()
        except BackendAPIError as e:
            logging.error(f"Error fetching history: {e.message}", extra={"request_id": request_id})
            errors.append(e.message)
            all_history = []
        averages = trends.average_amount_by_status(all_history)
        context.update(
            {
                "risk_slices": risk_slices(insights),
                "repayment_slices": repayment_slices(insights),
                "average_bars": charts.bar_chart(
                    [ChartPoint(label=s, value=v, formatted_date="") for s, v in averages.items()],
                    color="#667eea",
                    caption=lambda p: format_lakhs(p.value, digits=1),
                ),
                "score_bars": _distribution_bars(insights.credit_score_distribution, "#667eea"),
                "purpose_bars": _distribution_bars(insights.loan_purpose_distribution, "#10b981"),
                "type_bars": _distribution_bars(insights.loan_type_distribution, "#f59e0b"),
            }
        )

    return render(request, "admin/dashboard.html", context)


@router.get("/history/rows")
async def history_rows(
    request: Request,
    status: str = "",
    start_date: str = "",
    end_date: str = "",
    search: str = "",
    view: str = "",
    admin: Identity = Depends(require_admin),
    client: LoanSewaClient = Depends(get_backend_client),
    request_id: str = Depends(get_request_id),
):
    """
    History table body for live filter changes.

    Requests are sequenced per page view (admin id plus the view token the
    history tab was rendered with), so separate tabs filter independently. A
    response overtaken by a newer filter request from the same view is
    dropped with 204 and the browser keeps the fresher rows.
    """
    key = (admin.id, view)
    generation = history_generations.begin(key)
    try:
        history = await client.get_application_history(status, _parse_date(start_date), _parse_date(end_date), search)
    except BackendAPIError as e:
        logging.error(f"Error fetching history: {e.message}", extra={"request_id": request_id})
        if not history_generations.is_current(key, generation):
            return Response(status_code=204)
        return render(request, "admin/_history_rows.html", {"history": [], "error": e.message}, status_code=502)

    if not history_generations.is_current(key, generation):
        logging.info("Discarding stale history response", extra={"request_id": request_id, "generation": generation})
        return Response(status_code=204)

    return render(request, "admin/_history_rows.html", {"history": history, "error": ""})


async def _admin_action(
    action: str,
    target_id: str,
    call,
    success_message: str,
    failure_prefix: str,
    session: SessionContext,
    admin: Identity,
    request_id: str,
    redirect_to: str,
):
    try:
        await call
    except BackendAPIError as e:
        record_admin_action(action, succeeded=False)
        log_admin_action(request_id, admin.id, action, target_id, succeeded=False)
        session.flash(f"{failure_prefix}: {e.message}", kind="error")
    else:
        record_admin_action(action, succeeded=True)
        log_admin_action(request_id, admin.id, action, target_id, succeeded=True)
        session.flash(success_message, kind="success")
    return RedirectResponse(redirect_to, status_code=303)


@router.post("/applications/{app_id}/approve")
async def approve(
    app_id: str,
    session: SessionContext = Depends(get_session),
    admin: Identity = Depends(require_admin),
    client: LoanSewaClient = Depends(get_backend_client),
    request_id: str = Depends(get_request_id),
):
    return await _admin_action(
        "approve",
        app_id,
        client.approve_application(app_id, admin.id),
        "Application approved successfully",
        "Error approving application",
        session,
        admin,
        request_id,
        "/admin/dashboard",
    )


@router.post("/applications/{app_id}/reject")
async def reject(
    app_id: str,
    rejection_reason: str = Form(""),
    session: SessionContext = Depends(get_session),
    admin: Identity = Depends(require_admin),
    client: LoanSewaClient = Depends(get_backend_client),
    request_id: str = Depends(get_request_id),
):
    reason = rejection_reason.strip()
    if not reason:
        session.flash("Enter a rejection reason to reject an application", kind="error")
        return RedirectResponse("/admin/dashboard", status_code=303)

    return await _admin_action(
        "reject",
        app_id,
        client.reject_application(app_id, admin.id, reason),
        "Application rejected successfully",
        "Error rejecting application",
        session,
        admin,
        request_id,
        "/admin/dashboard",
    )


@router.post("/users/{user_id}/delete")
async def delete_user(
    user_id: str,
    session: SessionContext = Depends(get_session),
    admin: Identity = Depends(require_admin),
    client: LoanSewaClient = Depends(get_backend_client),
    request_id: str = Depends(get_request_id),
):
    return await _admin_action(
        "delete_user",
        user_id,
        client.delete_user(user_id),
        "User deleted successfully",
        "Error deleting user",
        session,
        admin,
        request_id,
        "/admin/dashboard?tab=settings",
    )
