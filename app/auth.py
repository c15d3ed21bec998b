from datetime import timedelta
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from app.config import get_settings
from app.database import get_db
from app.models.user import User, UserRole
from app.schemas.user import TokenPayload
from app.services.authorization import Actor
from app.utils.clock import utcnow

settings = get_settings()
security = HTTPBearer(auto_error=False)

# Use Argon2 for password hashing
pwd_context = CryptContext(
    schemes=["argon2"],
    deprecated="auto",
)

def hash_password(password: str) -> str:
    return pwd_context.hash(password)

def verify_password(plain: str, hashed: str | None) -> bool:
    if not hashed:
        return False
    return pwd_context.verify(plain, hashed)

def create_access_token(user_id: str, email: str) -> str:
    expire = utcnow() + timedelta(
        minutes=settings.access_token_expire_minutes
    )
    payload = {
        "sub": user_id,
        "email": email,
        "exp": expire,
        "type": "access",
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)

def decode_token(token: str) -> TokenPayload | None:
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.algorithm],
        )
    except JWTError:
        return None
    if payload.get("type") != "access" or "sub" not in payload:
        return None
    return TokenPayload(sub=payload["sub"], email=payload.get("email", ""), exp=payload["exp"])


def get_user_from_token(token: str, db: Session) -> User | None:
    """Resolve a bearer token string to a user. Returns None if invalid."""
    payload = decode_token(token)
    if not payload:
        return None
    return db.query(User).filter(User.id == payload.sub).first()


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    if not credentials:
        raise _unauthorized("Not authenticated")
    user = get_user_from_token(credentials.credentials, db)
    if not user:
        # Bad signature, expired, or the account no longer exists.
        raise _unauthorized("Invalid or expired token")
    return user


def actor_for(user: User) -> Actor:
    return Actor(actor_id=user.id, role=UserRole(user.role))


def get_current_actor(user: User = Depends(get_current_user)) -> Actor:
    """Identity handed to the services: just (actor_id, role)."""
    return actor_for(user)


def get_optional_actor(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
) -> Actor | None:
    """Like get_current_actor but None instead of 401. For the access-check endpoint."""
    if not credentials:
        return None
    user = get_user_from_token(credentials.credentials, db)
    return actor_for(user) if user else None
