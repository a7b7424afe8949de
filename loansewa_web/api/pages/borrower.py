"""Borrower pages: dashboard, loan application, credit analytics, improvement tips"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError

from loansewa_web.api.dependencies import get_backend_client, get_request_id, require_user
from loansewa_web.api.templating import render
from loansewa_web.config import settings
from loansewa_web.domain import charts, trends
from loansewa_web.domain.exceptions import BackendAPIError
from loansewa_web.infrastructure.clients.backend import LoanSewaClient
from loansewa_web.infrastructure.clients.schemas import Identity, LoanApplicationForm

router = APIRouter()

PERIODS = {1: "1 Month", 3: "3 Months", 6: "6 Months", 12: "12 Months"}
DEFAULT_PERIOD = 6


@router.get("/dashboard")
async def dashboard(
    request: Request,
    user: Identity = Depends(require_user),
    client: LoanSewaClient = Depends(get_backend_client),
    request_id: str = Depends(get_request_id),
):
    """Credit score gauge, risk band and loan summary for the signed-in borrower"""
    error = ""
    try:
        applications = await client.get_user_applications(user.id)
    except BackendAPIError as e:
        logging.error(f"Error fetching applications: {e.message}", extra={"request_id": request_id})
        applications, error = [], e.message

    latest = applications[0] if applications else None
    score: Optional[int] = latest.credit_score if latest else None

    return render(
        request,
        "dashboard.html",
        {
            "active": "dashboard",
            "user": user,
            "latest": latest,
            "applications": applications,
            "ring": charts.score_ring(score),
            "band": trends.risk_band(score),
            "message": trends.score_message(score) if score is not None else "",
            "outlook": trends.application_outlook(latest.status) if latest else "",
            "total_requested": trends.total_requested(applications),
            "error": error,
        },
    )


@router.get("/apply")
def apply_page(request: Request, user: Identity = Depends(require_user)):
    form = LoanApplicationForm()
    return _apply_form(request, user, form.model_dump())


def _apply_form(request: Request, user: Identity, form: dict, error: str = "", result=None, status_code: int = 200):
    return render(
        request,
        "apply.html",
        {
            "active": "apply",
            "user": user,
            "form": form,
            "ratio": trends.loan_to_income_ratio(_number(form.get("loan_amount")), _number(form.get("income"))),
            "error": error,
            "result": result,
        },
        status_code=status_code,
    )


def _number(value) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


@router.post("/apply")
async def apply(
    request: Request,
    user: Identity = Depends(require_user),
    client: LoanSewaClient = Depends(get_backend_client),
    request_id: str = Depends(get_request_id),
):
    """Validate the application form, submit it and show the returned assessment"""
    submitted = dict(await request.form())

    try:
        form = LoanApplicationForm.model_validate(submitted)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"])
        return _apply_form(request, user, submitted, error=f"{field}: {first['msg']}", status_code=400)

    try:
        application = await client.apply_for_loan(form, user.id)
    except BackendAPIError as e:
        logging.error(f"Application error: {e.message}", extra={"request_id": request_id})
        return _apply_form(request, user, form.model_dump(), error=e.message, status_code=502)

    logging.info(
        "Loan application assessed",
        extra={"request_id": request_id, "user_id": user.id, "credit_score": application.credit_score},
    )
    return _apply_form(request, user, form.model_dump(), result=application)


def _parse_period(raw: str) -> int:
    """Selected window in months; anything unrecognised falls back to 6"""
    try:
        months = int(raw)
    except ValueError:
        return DEFAULT_PERIOD
    return months if months in PERIODS else DEFAULT_PERIOD


@router.get("/analytics")
async def analytics(
    request: Request,
    period: str = "6",
    user: Identity = Depends(require_user),
    client: LoanSewaClient = Depends(get_backend_client),
    request_id: str = Depends(get_request_id),
):
    """Score trend statistics and score/amount bar charts over the selected period"""
    months = _parse_period(period)

    error = ""
    try:
        applications = await client.get_user_applications(user.id)
    except BackendAPIError as e:
        logging.error(f"Error fetching data: {e.message}", extra={"request_id": request_id})
        applications, error = [], e.message

    in_period = trends.filter_by_period(applications, months)
    stats = trends.score_stats(applications)
    arrow, trend_text = trends.trend_label(stats.current_change)

    score_bars = charts.bar_chart(
        trends.score_series(in_period, settings.chart_series_length),
        maximum=settings.score_chart_max,
        color=trends.score_color,
    )
    amount_bars = charts.bar_chart(
        trends.loan_amount_series(in_period, settings.chart_series_length),
        floor=settings.loan_chart_floor,
    )

    return render(
        request,
        "analytics.html",
        {
            "active": "analytics",
            "user": user,
            "applications": applications,
            "stats": stats,
            "trend_arrow": arrow,
            "trend_text": trend_text,
            "score_bars": score_bars,
            "amount_bars": amount_bars,
            "period": months,
            "periods": PERIODS,
            "error": error,
        },
    )


@router.get("/improve")
async def improve(
    request: Request,
    user: Identity = Depends(require_user),
    client: LoanSewaClient = Depends(get_backend_client),
    request_id: str = Depends(get_request_id),
):
    """Personalised suggestions for raising the borrower's credit score"""
    report, error = None, ""
    try:
        report = await client.get_improvement(user.id)
        if not report.success:
            error = report.message or "No credit assessment found yet."
    except BackendAPIError as e:
        logging.error(f"Error fetching suggestions: {e.message}", extra={"request_id": request_id})
        error = "Failed to load suggestions. Please try again."

    score = report.credit_score if report and report.success else 0
    return render(
        request,
        "improve.html",
        {
            "active": "improve",
            "user": user,
            "score": score,
            "rating": trends.rating_for_score(score) if score else "",
            "suggestions": report.suggestions if report and report.success else [],
            "priority_class": trends.priority_class,
            "error": error,
        },
    )
