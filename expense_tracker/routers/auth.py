from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from expense_tracker.auth import SESSION_USER_ID, RequestContext, get_request_context, login_session, logout_session
from expense_tracker.crud import crud_user
from expense_tracker.models import user as user_models
from expense_tracker.db.core import get_db, NotFoundError
from expense_tracker.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["auth"],
)


@router.post("/register", response_model=user_models.UserResponse, status_code=status.HTTP_201_CREATED)
def register(user: user_models.UserCreate, db: Session = Depends(get_db)):
    """
    Register a new account.
    """
    try:
        db_user = crud_user.create_db_user(db=db, user_data=user)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return db_user


@router.post("/login", response_model=user_models.UserResponse)
def login(request: Request, user_login: user_models.UserLogin, db: Session = Depends(get_db)):
    """
    Check credentials and start a session.
    """
    user = crud_user.authenticate_user(db, email=user_login.email, password=user_login.password)
    if not user:
        logger.warning("Failed login attempt")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")
    login_session(request, user)
    logger.info(f"User {user.id} logged in")
    return user


@router.post("/logout")
def logout(request: Request):
    user_id = request.session.get(SESSION_USER_ID)
    logout_session(request)
    if user_id is not None:
        logger.info(f"User {user_id} logged out")
    return {"message": "Logout successful"}


@router.get("/me", response_model=user_models.UserResponse)
def read_current_user(ctx: RequestContext = Depends(get_request_context), db: Session = Depends(get_db)):
    db_user = crud_user.read_db_user(db, user_id=ctx.user_id)
    if db_user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return db_user


@router.put("/me", response_model=user_models.UserResponse)
def update_current_user(
    request: Request,
    user: user_models.UserUpdate,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db)
):
    """
    Update the logged-in user's name or email.
    """
    try:
        updated_user = crud_user.update_db_user(db=db, user_id=ctx.user_id, user_updates=user)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    login_session(request, updated_user)
    return updated_user


@router.post("/change-password", status_code=status.HTTP_200_OK)
def change_password(
    password_change: user_models.PasswordChange,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db)
):
    try:
        crud_user.change_user_password(db=db, user_id=ctx.user_id, password_change=password_change)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return {"message": "Password changed successfully"}
