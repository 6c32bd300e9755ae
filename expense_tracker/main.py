from contextlib import asynccontextmanager

from fastapi import FastAPI
from starlette.middleware.sessions import SessionMiddleware

from expense_tracker.config import SECRET_KEY, SESSION_COOKIE, SESSION_MAX_AGE
from expense_tracker.db.core import init_db
from expense_tracker.logging_config import setup_logging
from expense_tracker.routers.auth import router as auth_router
from expense_tracker.routers.categories import router as categories_router
from expense_tracker.routers.expenses import router as expenses_router
from expense_tracker.routers.dashboard import router as dashboard_router
from expense_tracker.routers.export import router as export_router

logger = setup_logging()


@asynccontextmanager
async def lifespan(_: FastAPI):
    init_db()
    logger.info("Expense Tracker API started")
    yield


app = FastAPI(title="Expense Tracker API", lifespan=lifespan)

app.add_middleware(
    SessionMiddleware,
    secret_key=SECRET_KEY,
    session_cookie=SESSION_COOKIE,
    max_age=SESSION_MAX_AGE,
    same_site="lax",
)

app.include_router(auth_router)
app.include_router(categories_router)
app.include_router(expenses_router)
app.include_router(dashboard_router)
app.include_router(export_router)


@app.get("/")
def read_root():
    return "Server is running."
