"""
Security utilities, sessions and authentication
"""

from fastapi import HTTPException, Depends, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from passlib.context import CryptContext
from starlette.requests import HTTPConnection
from typing import Dict, List, Optional
import time
from collections import defaultdict

from noravenolife.core.config import settings

# Simple in-memory rate limiter
rate_limiter = defaultdict(list)

security = HTTPBearer()

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)

def verify_password(plain_password: str, password_hash: Optional[str]) -> bool:
    if not password_hash:
        return False
    return pwd_context.verify(plain_password, password_hash)

def verify_admin_token(credentials: HTTPAuthorizationCredentials = Depends(security)):
    """Verify admin authentication token"""
    if credentials.credentials != settings.ADMIN_TOKEN:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid admin token"
        )
    return credentials.credentials

# -------- Session helpers --------

def login_user(conn: HTTPConnection, user_id: str, email: Optional[str], display_name: Optional[str], role: str) -> None:
    conn.session.clear()
    conn.session["user_id"] = user_id
    conn.session["email"] = email
    conn.session["display_name"] = display_name
    conn.session["role"] = role

def logout_user(conn: HTTPConnection) -> None:
    conn.session.clear()

def get_session_user(conn: HTTPConnection) -> Optional[Dict]:
    user_id = conn.session.get("user_id")
    if user_id is None:
        return None
    return {
        "id": user_id,
        "email": conn.session.get("email"),
        "display_name": conn.session.get("display_name"),
        "role": conn.session.get("role", "attendee"),
    }

def require_user(conn: HTTPConnection) -> Dict:
    """Dependency for JSON routes that need a signed-in user"""
    user = get_session_user(conn)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Login required"
        )
    return user

def flash(conn: HTTPConnection, message: str, category: str = "info") -> None:
    """Queue a banner message for the next rendered page"""
    conn.session.setdefault("_flashes", []).append({"message": message, "category": category})

def pop_flashes(conn: HTTPConnection) -> List[Dict]:
    return conn.session.pop("_flashes", [])

# -------- Rate limiting --------

def rate_limit_check(client_ip: str, limit: int = None) -> bool:
    """Simple rate limiting by IP address"""
    if limit is None:
        limit = settings.RATE_LIMIT_PER_MINUTE

    current_time = time.time()
    minute_ago = current_time - 60

    # Clean old requests
    rate_limiter[client_ip] = [
        req_time for req_time in rate_limiter[client_ip]
        if req_time > minute_ago
    ]

    if len(rate_limiter[client_ip]) >= limit:
        return False

    rate_limiter[client_ip].append(current_time)
    return True

def get_client_ip(request) -> str:
    """Extract client IP from request"""
    # Reverse proxy setups
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip

    return request.client.host if request.client else "unknown"
