"""
User profile service
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from sqlalchemy.orm import Session

from noravenolife.models import UserProfile
from noravenolife.schemas.user import UserProfileOut, UserRole
from noravenolife.services.repositories import DuplicateRecordError, UserRepo, use_sql
from noravenolife.utils.formatting import to_naive_utc

logger = logging.getLogger(__name__)

DEFAULT_ROLE = "attendee"


def profile_to_schema(profile: Union[UserProfile, Dict[str, Any]]) -> UserProfileOut:
    if isinstance(profile, dict):
        get = profile.get
    else:
        get = lambda field: getattr(profile, field)  # noqa: E731

    return UserProfileOut(
        id=get("id"),
        email=get("email"),
        display_name=get("display_name"),
        photo_url=get("photo_url"),
        role=get("role") or DEFAULT_ROLE,
        created_at=to_naive_utc(get("created_at")),
        updated_at=to_naive_utc(get("updated_at")),
    )


class UserService:
    """Service for user profiles keyed by the auth provider's subject id"""

    @staticmethod
    def ensure_user_profile(
        db: Session,
        uid: str,
        email: Optional[str],
        display_name: Optional[str] = None,
        photo_url: Optional[str] = None,
        password_hash: Optional[str] = None
    ) -> UserProfileOut:
        """Create the profile on first sign-in, otherwise refresh its identity fields.

        Raises DuplicateRecordError when the email belongs to another profile.
        """
        now = datetime.utcnow()

        if use_sql():
            profile = UserRepo.get_sql(db, uid)
            if profile:
                profile.email = email
                profile.display_name = display_name
                profile.photo_url = photo_url
                if password_hash:
                    profile.password_hash = password_hash
                profile.updated_at = now
                logger.info(f"User profile updated for: {uid}")
            else:
                profile = UserProfile(
                    id=uid,
                    email=email,
                    display_name=display_name,
                    photo_url=photo_url,
                    role=DEFAULT_ROLE,
                    password_hash=password_hash,
                    created_at=now,
                    updated_at=now
                )
                logger.info(f"User profile created for: {uid}")
            return profile_to_schema(UserRepo.save_sql(db, profile))

        owner = UserRepo.get_by_email_doc(email) if email else None
        if owner and owner["id"] != uid:
            raise DuplicateRecordError(f"Email {email} already belongs to another profile")

        existing = UserRepo.get_doc(uid)
        if existing:
            data = {**existing, "email": email, "display_name": display_name, "photo_url": photo_url, "updated_at": now}
            if password_hash:
                data["password_hash"] = password_hash
            logger.info(f"User profile updated for: {uid}")
        else:
            data = {
                "id": uid,
                "email": email,
                "display_name": display_name,
                "photo_url": photo_url,
                "role": DEFAULT_ROLE,
                "password_hash": password_hash,
                "created_at": now,
                "updated_at": now,
            }
            logger.info(f"User profile created for: {uid}")
        return profile_to_schema(UserRepo.save_doc(data))

    @staticmethod
    def get_user_profile(db: Session, uid: str) -> Optional[UserProfileOut]:
        profile = UserRepo.get_sql(db, uid) if use_sql() else UserRepo.get_doc(uid)
        if not profile:
            logger.info(f"No user profile found for UID: {uid}")
            return None
        return profile_to_schema(profile)

    @staticmethod
    def get_credentials_by_email(db: Session, email: str) -> Optional[Dict[str, Any]]:
        """id and password hash for an email, or None"""
        if use_sql():
            profile = UserRepo.get_by_email_sql(db, email)
            return {"id": profile.id, "password_hash": profile.password_hash} if profile else None
        profile = UserRepo.get_by_email_doc(email)
        return {"id": profile["id"], "password_hash": profile.get("password_hash")} if profile else None

    @staticmethod
    def update_user_role(db: Session, uid: str, new_role: UserRole) -> Optional[UserProfileOut]:
        now = datetime.utcnow()
        if use_sql():
            profile = UserRepo.get_sql(db, uid)
            if not profile:
                logger.error(f"User {uid} not found for role update.")
                return None
            profile.role = new_role
            profile.updated_at = now
            profile = UserRepo.save_sql(db, profile)
        else:
            existing = UserRepo.get_doc(uid)
            if not existing:
                logger.error(f"User {uid} not found for role update.")
                return None
            profile = UserRepo.save_doc({**existing, "role": new_role, "updated_at": now})

        logger.info(f"User role updated for {uid} to {new_role}")
        return profile_to_schema(profile)

    @staticmethod
    def list_user_profiles(db: Session) -> List[UserProfileOut]:
        profiles = UserRepo.list_sql(db) if use_sql() else UserRepo.list_doc()
        return [profile_to_schema(p) for p in profiles]
