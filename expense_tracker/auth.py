from fastapi import HTTPException, Request, status
from pydantic import BaseModel
from typing import Optional

from expense_tracker.db.core import UserDB


SESSION_USER_ID = "user_id"
SESSION_USER_NAME = "user_name"
SESSION_LOGGED_IN = "logged_in"


class RequestContext(BaseModel):
    """Identity of the logged-in user for the current request"""
    user_id: int
    user_name: Optional[str] = None


def login_session(request: Request, user: UserDB) -> None:
    request.session.clear()
    request.session[SESSION_USER_ID] = user.id
    request.session[SESSION_USER_NAME] = user.name
    request.session[SESSION_LOGGED_IN] = True


def logout_session(request: Request) -> None:
    request.session.clear()


def get_request_context(request: Request) -> RequestContext:
    """
    Dependency gating every record operation.

    Raises 401 unless the session carries a logged-in user.
    """
    session = request.session
    user_id = session.get(SESSION_USER_ID)
    if session.get(SESSION_LOGGED_IN) is not True or user_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized access")
    return RequestContext(user_id=user_id, user_name=session.get(SESSION_USER_NAME))
