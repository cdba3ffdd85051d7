import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt
from fastapi import APIRouter, HTTPException, Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from ..config import JWT_SECRET, JWT_ALGORITHM, JWT_EXPIRE_MINUTES
from ..database import get_user_store
from ..errors import ValidationError
from ..models.user import UserCreate, UserLogin, UserOut, TokenOut, user_from_doc
from ..storage.users import UserStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["users"])

security = HTTPBearer(auto_error=False)


# ----------------- TOKENS -----------------
def create_access_token(user_id: str) -> str:
    payload = {
        "sub": user_id,
        "exp": datetime.now(timezone.utc) + timedelta(minutes=JWT_EXPIRE_MINUTES),
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    users: UserStore = Depends(get_user_store),
) -> dict:
    if credentials is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    try:
        payload = jwt.decode(credentials.credentials, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except jwt.PyJWTError:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(status_code=401, detail="Invalid token")
    user_doc = users.find_by_id(user_id)
    if not user_doc:
        raise HTTPException(status_code=401, detail="User not found")
    return user_doc


# ----------------- REGISTER -----------------
@router.post("/register", response_model=UserOut)
def register(user: UserCreate, users: UserStore = Depends(get_user_store)):
    if users.find_by_email(user.email):
        raise ValidationError({"email": "Email already exists"})

    hashed_pw = bcrypt.hashpw(user.password.encode(), bcrypt.gensalt())
    user_doc = {
        "name": user.name,
        "email": user.email,
        "passwordHash": hashed_pw.decode(),
        "avatar": user.avatar,
        "date": datetime.now(timezone.utc),
    }
    # The unique email index catches a registration racing the check above.
    if users.insert(user_doc) is None:
        raise ValidationError({"email": "Email already exists"})

    logger.info("Registered user %s", user_doc["_id"])
    return user_from_doc(user_doc)


# ----------------- LOGIN -----------------
@router.post("/login", response_model=TokenOut)
def login(user: UserLogin, users: UserStore = Depends(get_user_store)):
    user_doc = users.find_by_email(user.email)
    if not user_doc:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    if not bcrypt.checkpw(user.password.encode(), user_doc["passwordHash"].encode()):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    return TokenOut(
        access_token=create_access_token(str(user_doc["_id"])),
        user=user_from_doc(user_doc),
    )


# ----------------- CURRENT USER -----------------
@router.get("/current", response_model=UserOut)
def current(current_user: dict = Depends(get_current_user)):
    return user_from_doc(current_user)
