from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.database import get_db
from app.guard import check_access
from app.models.user import User, UserRole
from app.auth import create_access_token, get_current_user, get_optional_actor, hash_password, verify_password
from app.schemas.user import AccessCheckResponse, UserResponse, LoginRequest, RegisterRequest, TokenResponse
from app.services.authorization import Actor

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def register(body: RegisterRequest, db: Session = Depends(get_db)):
    """Create an account. The very first account becomes ADMIN, every later one USER."""
    email = body.email.strip().lower()
    if not email or "@" not in email:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="A valid email is required")
    if len(body.password) < 6:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Password must be at least 6 characters")
    if db.query(User).filter(func.lower(User.email) == email).first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")
    role = UserRole.ADMIN if db.query(User).count() == 0 else UserRole.USER
    user = User(
        email=email,
        password=hash_password(body.password),
        full_name=body.full_name.strip(),
        role=role.value,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")
    db.refresh(user)
    return TokenResponse(access_token=create_access_token(user.id, user.email))


@router.post("/login", response_model=TokenResponse)
def login(body: LoginRequest, db: Session = Depends(get_db)):
    """Login with email and password."""
    email = body.email.strip().lower()
    user = db.query(User).filter(func.lower(User.email) == email).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")
    if not verify_password(body.password, user.password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")
    token = create_access_token(user.id, user.email)
    return TokenResponse(access_token=token)


@router.get("/me", response_model=UserResponse)
def me(user: User = Depends(get_current_user)):
    return user


@router.get("/check-access", response_model=AccessCheckResponse)
def check_access_endpoint(
    required_role: UserRole | None = None,
    actor: Actor | None = Depends(get_optional_actor),
):
    """
    Route guard for the frontend. Never 401/403: answers allowed + redirect_hint
    ("/sign-in" when not logged in, "/" when the role is insufficient).
    """
    result = check_access(actor, required_role)
    return AccessCheckResponse(
        allowed=result.allowed,
        redirect_hint=result.redirect_hint,
        role=actor.role if actor else None,
    )
