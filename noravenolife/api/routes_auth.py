"""
Sign-in, sign-up and sign-out routes
"""

import logging

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from noravenolife.core.db import get_db
from noravenolife.schemas.user import FirebaseSessionRequest
from noravenolife.services.auth_service import AuthError, AuthService
from noravenolife.utils.responses import success_response, error_response
from noravenolife.utils.security import flash, get_session_user, login_user, logout_user
from noravenolife.utils.templating import render

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/login")
async def login_page(request: Request, mode: str = "signin"):
    """Sign-in / sign-up form"""
    if get_session_user(request):
        return RedirectResponse(url="/", status_code=303)
    return render(request, "login.html", is_login=mode != "signup", errors=[], email="")

@router.post("/login")
async def login_submit(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    mode: str = Form("signin"),
    db: Session = Depends(get_db)
):
    """Handle the sign-in / sign-up form"""
    is_login = mode != "signup"
    form, errors = AuthService.validate_form({"email": email.strip(), "password": password})
    if not form:
        return render(request, "login.html", status_code=422, is_login=is_login, errors=errors, email=email)

    try:
        if is_login:
            profile = AuthService.sign_in(db, form)
        else:
            profile = AuthService.sign_up(db, form)
    except AuthError as e:
        return render(request, "login.html", status_code=400, is_login=is_login, errors=[str(e)], email=email)

    login_user(request, profile.id, profile.email, profile.display_name, profile.role)
    flash(request, "Welcome back!" if is_login else "Your account has been created.", "success")
    return RedirectResponse(url="/", status_code=303)

@router.post("/logout")
async def logout(request: Request):
    logout_user(request)
    return RedirectResponse(url="/", status_code=303)

@router.post("/auth/session")
async def firebase_session(
    request: Request,
    payload: FirebaseSessionRequest,
    db: Session = Depends(get_db)
):
    """Exchange a Firebase ID token for a session cookie"""
    try:
        profile = AuthService.sign_in_with_firebase(db, payload.id_token)
    except AuthError as e:
        return error_response(message=str(e), error_code="auth_failed", status_code=401)

    login_user(request, profile.id, profile.email, profile.display_name, profile.role)
    return success_response(message="Signed in", data=profile.dict())
