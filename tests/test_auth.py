"""
Tests for sign-up / sign-in
"""

import pytest

from noravenolife.core.config import settings
from noravenolife.services import auth_service
from noravenolife.services.auth_service import AuthError, AuthService
from noravenolife.services.repositories import DuplicateRecordError
from noravenolife.services.user_service import UserService

def signup(db, email="new@example.com", password="secret1"):
    form, errors = AuthService.validate_form({"email": email, "password": password})
    assert errors == []
    return AuthService.sign_up(db, form)

def test_validate_form_messages():
    form, errors = AuthService.validate_form({"email": "not-an-email", "password": "123"})

    assert form is None
    assert errors == ["Invalid email address", "Password must be at least 6 characters long"]

def test_validate_form_accepts_valid_input():
    form, errors = AuthService.validate_form({"email": "raver@example.com", "password": "123456"})

    assert errors == []
    assert form.password == "123456"

def test_sign_up_creates_attendee_profile(db_session):
    profile = signup(db_session, email="New@Example.com")

    assert profile.id.startswith("local-")
    assert profile.email == "new@example.com"
    assert profile.display_name == "new"
    assert profile.role == "attendee"

    stored = UserService.get_credentials_by_email(db_session, "new@example.com")
    assert stored["password_hash"] != "secret1"

def test_sign_up_rejects_duplicate_email(db_session):
    signup(db_session)

    with pytest.raises(AuthError, match="already exists"):
        signup(db_session)

def test_sign_in(db_session):
    created = signup(db_session)
    form, _ = AuthService.validate_form({"email": "new@example.com", "password": "secret1"})

    assert AuthService.sign_in(db_session, form).id == created.id

def test_sign_in_wrong_password(db_session):
    signup(db_session)
    form, _ = AuthService.validate_form({"email": "new@example.com", "password": "wrong-password"})

    with pytest.raises(AuthError, match="Invalid email or password."):
        AuthService.sign_in(db_session, form)

def test_sign_in_unknown_email(db_session):
    form, _ = AuthService.validate_form({"email": "ghost@example.com", "password": "secret1"})

    with pytest.raises(AuthError):
        AuthService.sign_in(db_session, form)

def test_sign_in_profile_without_password(db_session, lineup):
    """Profiles created through Firebase have no local password"""
    form, _ = AuthService.validate_form({"email": "raver@example.com", "password": "secret1"})

    with pytest.raises(AuthError):
        AuthService.sign_in(db_session, form)

def test_firebase_sign_in_requires_credentials(db_session, monkeypatch):
    monkeypatch.setattr(settings, "FIREBASE_CREDENTIALS_JSON", None)
    monkeypatch.setattr(settings, "FIREBASE_CREDENTIALS_B64", None)
    monkeypatch.setattr(settings, "FIREBASE_CREDENTIALS_FILE", None)

    with pytest.raises(AuthError, match="not configured"):
        AuthService.sign_in_with_firebase(db_session, "token")

def test_sign_up_memory_backend(memory_backend):
    profile = signup(None)

    assert memory_backend.get_profile(profile.id)["email"] == "new@example.com"
    with pytest.raises(AuthError):
        signup(None)

def fake_firebase(monkeypatch, claims):
    monkeypatch.setattr(auth_service, "firebase_credentials_configured", lambda: True)
    monkeypatch.setattr(auth_service, "init_firebase_app", lambda: None)
    monkeypatch.setattr(auth_service.firebase_auth, "verify_id_token", lambda token: claims)

def test_firebase_sign_in_creates_profile(db_session, monkeypatch):
    fake_firebase(monkeypatch, {"uid": "firebase-uid-1", "email": "fb@example.com", "name": "Fan"})

    profile = AuthService.sign_in_with_firebase(db_session, "token")

    assert profile.id == "firebase-uid-1"
    assert profile.display_name == "Fan"

def test_profile_email_taken_by_another_account(db_session):
    signup(db_session)

    with pytest.raises(DuplicateRecordError):
        UserService.ensure_user_profile(db_session, uid="firebase-uid-1", email="new@example.com")

    # The session is still usable after the failed write
    assert UserService.get_user_profile(db_session, "firebase-uid-1") is None
    assert len(UserService.list_user_profiles(db_session)) == 1

def test_firebase_sign_in_with_taken_email(db_session, monkeypatch):
    signup(db_session)
    fake_firebase(monkeypatch, {"uid": "firebase-uid-1", "email": "new@example.com"})

    with pytest.raises(AuthError, match="already exists"):
        AuthService.sign_in_with_firebase(db_session, "token")

def test_profile_email_taken_memory_backend(memory_backend):
    signup(None)

    with pytest.raises(DuplicateRecordError):
        UserService.ensure_user_profile(None, uid="firebase-uid-1", email="new@example.com")
    assert memory_backend.get_profile("firebase-uid-1") is None
