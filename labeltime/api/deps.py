"""
FastAPI dependencies (DB session, current user, clock)
"""
from fastapi import Depends, Request, HTTPException, status
from sqlalchemy.orm import Session

from labeltime.application.clock import ClockProvider
from labeltime.infrastructure.db.session import get_db as _get_db
from labeltime.infrastructure.db.models import User


# Re-export get_db for routers
get_db = _get_db


def get_current_user(request: Request, db: Session = Depends(get_db)) -> User:
    """
    Current user from the session cookie.

    Raises:
        HTTPException(401): not logged in or user gone
    """
    user_id = request.session.get("user_id")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated"
        )

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found"
        )

    return user


def get_clock() -> ClockProvider:
    return ClockProvider()
