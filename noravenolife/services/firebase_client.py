"""
Firebase initialization and helpers
"""

from __future__ import annotations

import json
from functools import lru_cache
from typing import Any
import base64
import os

import firebase_admin
from firebase_admin import credentials, firestore

from noravenolife.core.config import settings


def firebase_credentials_configured() -> bool:
    return bool(
        settings.FIREBASE_CREDENTIALS_JSON
        or settings.FIREBASE_CREDENTIALS_B64
        or settings.FIREBASE_CREDENTIALS_FILE
    )


def init_firebase_app() -> firebase_admin.App:
    """Initialize the default Firebase app once and return it.

    Expects credentials via one of: FIREBASE_CREDENTIALS_JSON, FIREBASE_CREDENTIALS_B64, FIREBASE_CREDENTIALS_FILE.
    """
    if firebase_admin._apps:
        return firebase_admin.get_app()

    info: dict[str, Any] | None = None
    if settings.FIREBASE_CREDENTIALS_JSON:
        info = json.loads(settings.FIREBASE_CREDENTIALS_JSON)
    elif settings.FIREBASE_CREDENTIALS_B64:
        decoded = base64.b64decode(settings.FIREBASE_CREDENTIALS_B64).decode("utf-8")
        info = json.loads(decoded)
    elif settings.FIREBASE_CREDENTIALS_FILE and os.path.exists(settings.FIREBASE_CREDENTIALS_FILE):
        with open(settings.FIREBASE_CREDENTIALS_FILE, "r", encoding="utf-8") as f:
            info = json.load(f)

    if not info:
        raise RuntimeError("Firebase credentials not provided. Set FIREBASE_CREDENTIALS_FILE, FIREBASE_CREDENTIALS_JSON, or FIREBASE_CREDENTIALS_B64")

    cred = credentials.Certificate(info)
    return firebase_admin.initialize_app(cred)


@lru_cache(maxsize=1)
def get_firestore_client():
    """Return a cached Firestore client if the Firestore backend is enabled."""
    if settings.STORAGE_BACKEND != "firestore":
        return None

    init_firebase_app()
    return firestore.client()
