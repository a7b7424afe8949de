"""Landing, borrower signup/login and logout pages"""

import logging
from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse

from loansewa_web.api.dependencies import get_backend_client, get_request_id, get_session
from loansewa_web.api.templating import render
from loansewa_web.domain.exceptions import BackendAPIError
from loansewa_web.domain.session import SessionContext
from loansewa_web.infrastructure.clients.backend import LoanSewaClient

router = APIRouter()

IDENTIFIER_KINDS = {
    "mobile": ("Mobile Number", "Enter 10-digit mobile number"),
    "aadhar": ("Aadhar Number", "Enter 12-digit Aadhar number"),
    "email": ("Email", "Enter your email address"),
}


@router.get("/")
def landing(request: Request):
    return render(request, "landing.html")


@router.get("/login")
def login_page(request: Request, method: str = "mobile", session: SessionContext = Depends(get_session)):
    if session.user is not None:
        return RedirectResponse("/dashboard", status_code=303)
    return _login_form(request, method)


def _login_form(request: Request, method: str, error: str = "", identifier: str = "", status_code: int = 200):
    if method not in IDENTIFIER_KINDS:
        method = "mobile"
    label, placeholder = IDENTIFIER_KINDS[method]
    return render(
        request,
        "login.html",
        {
            "method": method,
            "methods": IDENTIFIER_KINDS,
            "label": label,
            "placeholder": placeholder,
            "identifier": identifier,
            "error": error,
        },
        status_code=status_code,
    )


@router.post("/login")
async def login(
    request: Request,
    identifier: str = Form(...),
    password: str = Form(...),
    method: str = Form("mobile"),
    remember_me: bool = Form(False),
    session: SessionContext = Depends(get_session),
    client: LoanSewaClient = Depends(get_backend_client),
    request_id: str = Depends(get_request_id),
):
    try:
        user = await client.login(identifier, password)
    except BackendAPIError as e:
        logging.warning(f"Login failed: {e.message}", extra={"request_id": request_id})
        return _login_form(request, method, error=e.message, identifier=identifier, status_code=401)

    session.sign_in_user(user, remember=remember_me)
    return RedirectResponse("/dashboard", status_code=303)


@router.get("/signup")
def signup_page(request: Request, session: SessionContext = Depends(get_session)):
    if session.user is not None:
        return RedirectResponse("/dashboard", status_code=303)
    return render(request, "signup.html", {"form": {}, "error": ""})


@router.post("/signup")
async def signup(
    request: Request,
    full_name: str = Form(...),
    email: str = Form(...),
    mobile_number: str = Form(...),
    aadhar: str = Form(""),
    password: str = Form(...),
    confirm_password: str = Form(...),
    session: SessionContext = Depends(get_session),
    client: LoanSewaClient = Depends(get_backend_client),
    request_id: str = Depends(get_request_id),
):
    form = {"full_name": full_name, "email": email, "mobile_number": mobile_number, "aadhar": aadhar}

    if password != confirm_password:
        return render(request, "signup.html", {"form": form, "error": "Passwords do not match"}, status_code=400)

    try:
        user = await client.signup({**form, "password": password})
    except BackendAPIError as e:
        logging.warning(f"Signup failed: {e.message}", extra={"request_id": request_id})
        return render(request, "signup.html", {"form": form, "error": e.message}, status_code=400)

    session.sign_in_user(user)
    return RedirectResponse("/dashboard", status_code=303)


@router.post("/logout")
def logout(session: SessionContext = Depends(get_session)):
    session.sign_out_user()
    return RedirectResponse("/", status_code=303)
