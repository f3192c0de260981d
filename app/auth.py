import os
from datetime import datetime
from typing import Optional
from passlib.context import CryptContext
from itsdangerous import URLSafeTimedSerializer, BadSignature, SignatureExpired
from fastapi import Request, HTTPException, WebSocket, status, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.user import User

# pbkdf2_sha256 is pure Python and avoids compiled bcrypt version issues
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

# Session serializer
SECRET_KEY = os.getenv("SECRET_KEY", "change-me-in-production-at-least-32-characters")
SESSION_COOKIE = "session"
SESSION_EXPIRE_MINUTES = int(os.getenv("SESSION_EXPIRE_MINUTES", "10080"))
serializer = URLSafeTimedSerializer(SECRET_KEY, salt="daybook-session")


def hash_password(password: str) -> str:
    """Hash a password for storing."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a stored password against one provided by user."""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        # Malformed or unknown hash
        return False


def create_session_token(user_id: int) -> str:
    """Create a session token for a user."""
    data = {
        "user_id": user_id,
        "created": datetime.utcnow().isoformat()
    }
    return serializer.dumps(data)


def decode_session_token(token: str) -> Optional[dict]:
    """Decode and validate a session token."""
    try:
        return serializer.loads(token, max_age=SESSION_EXPIRE_MINUTES * 60)
    except (BadSignature, SignatureExpired):
        return None


def _user_from_token(token: Optional[str], db: Session) -> Optional[User]:
    if not token:
        return None

    data = decode_session_token(token)
    if not data:
        return None

    return db.query(User).filter(
        User.id == data.get("user_id"), User.is_active.is_(True)
    ).first()


def get_current_user(request: Request, db: Session = Depends(get_db)) -> Optional[User]:
    """Return the signed-in user, or None."""
    return _user_from_token(request.cookies.get(SESSION_COOKIE), db)


def require_user(request: Request, db: Session = Depends(get_db)) -> User:
    """API dependency: the signed-in user or a 401."""
    user = get_current_user(request, db)
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return user


def get_websocket_user(websocket: WebSocket, db: Session = Depends(get_db)) -> Optional[User]:
    return _user_from_token(websocket.cookies.get(SESSION_COOKIE), db)


def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    """Authenticate a user by email and password."""
    user = db.query(User).filter(User.email == email.strip().lower()).first()
    if not user:
        return None
    if not user.is_active:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


def set_session_cookie(response, user_id: int):
    """Set session cookie on response."""
    token = create_session_token(user_id)
    response.set_cookie(
        key=SESSION_COOKIE,
        value=token,
        httponly=True,
        max_age=SESSION_EXPIRE_MINUTES * 60,
        samesite="lax"
    )
    return response


def clear_session_cookie(response):
    """Clear session cookie on response."""
    response.delete_cookie(SESSION_COOKIE)
    return response
