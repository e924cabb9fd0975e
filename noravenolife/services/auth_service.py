"""
Sign-up / sign-in service.

Email and password accounts are stored with the user profile. Firebase
accounts are verified with the Admin SDK from an ID token the browser
obtained through the Firebase client SDK.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional, Tuple

from firebase_admin import auth as firebase_auth
from pydantic import ValidationError
from sqlalchemy.orm import Session

from noravenolife.core.config import settings
from noravenolife.schemas.user import AuthForm, UserProfileOut
from noravenolife.services.firebase_client import firebase_credentials_configured, init_firebase_app
from noravenolife.services.repositories import DuplicateRecordError
from noravenolife.services.user_service import UserService
from noravenolife.utils.security import get_password_hash, verify_password

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password."
EMAIL_TAKEN = "An account with this email already exists."

FIELD_MESSAGES = {
    "email": "Invalid email address",
    "password": f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters long",
}


class AuthError(Exception):
    """Authentication failed; the message is safe to show to the user"""


class AuthService:
    """Service for authenticating users"""

    @staticmethod
    def validate_form(data: Dict[str, Any]) -> Tuple[Optional[AuthForm], List[str]]:
        """Validate raw form input, returning user-facing messages on failure"""
        try:
            return AuthForm(**data), []
        except ValidationError as exc:
            errors = []
            for error in exc.errors():
                field = str(error["loc"][0]) if error["loc"] else ""
                message = FIELD_MESSAGES.get(field, error["msg"])
                if message not in errors:
                    errors.append(message)
            return None, errors

    @staticmethod
    def sign_up(db: Session, form: AuthForm) -> UserProfileOut:
        email = str(form.email).lower()
        if UserService.get_credentials_by_email(db, email):
            logger.warning(f"Sign-up rejected, email already registered: {email}")
            raise AuthError(EMAIL_TAKEN)

        uid = f"local-{uuid.uuid4().hex}"
        try:
            profile = UserService.ensure_user_profile(
                db,
                uid=uid,
                email=email,
                display_name=email.split("@")[0],
                password_hash=get_password_hash(form.password)
            )
        except DuplicateRecordError:
            logger.warning(f"Sign-up rejected, email already registered: {email}")
            raise AuthError(EMAIL_TAKEN)
        logger.info(f"Signup successful for {uid}")
        return profile

    @staticmethod
    def sign_in(db: Session, form: AuthForm) -> UserProfileOut:
        email = str(form.email).lower()
        credentials = UserService.get_credentials_by_email(db, email)
        if not credentials or not verify_password(form.password, credentials["password_hash"]):
            logger.warning(f"Failed sign-in for {email}")
            raise AuthError(INVALID_CREDENTIALS)

        profile = UserService.get_user_profile(db, credentials["id"])
        logger.info(f"Login successful for {profile.id}")
        return profile

    @staticmethod
    def sign_in_with_firebase(db: Session, id_token: str) -> UserProfileOut:
        """Verify a Firebase ID token and make sure the user has a profile"""
        if not firebase_credentials_configured():
            raise AuthError("Firebase sign-in is not configured.")

        init_firebase_app()
        try:
            decoded = firebase_auth.verify_id_token(id_token)
        except (ValueError, firebase_auth.InvalidIdTokenError, firebase_auth.ExpiredIdTokenError) as exc:
            logger.error(f"Authentication error: {exc}")
            raise AuthError("Could not verify your sign-in. Please try again.")

        try:
            return UserService.ensure_user_profile(
                db,
                uid=decoded["uid"],
                email=decoded.get("email"),
                display_name=decoded.get("name"),
                photo_url=decoded.get("picture")
            )
        except DuplicateRecordError:
            logger.warning(f"Firebase sign-in for {decoded['uid']} rejected, email belongs to another account")
            raise AuthError(f"{EMAIL_TAKEN} Sign in with your email and password.")
