# ResultSheet - Student results manager
# Copyright (C) 2026 (linuxdev)
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.


import logging
import os
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from sqlalchemy.exc import OperationalError
from starlette.exceptions import HTTPException
from starlette.middleware.sessions import SessionMiddleware
from config import settings
from database import Base, engine, SessionLocal
from crud_ops import create_admin, get_admin_by_email
from exceptions import ResultsError
from router_api import router as api_router
from router_auth import router as auth_router
from router_views import router as views_router
import models  # noqa: F401  registers the tables on Base.metadata

logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

BASE_DIR = os.path.dirname(__file__)


def init_db():
    """Create tables and the configured super admin if missing."""
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        if not get_admin_by_email(db, settings.admin_email):
            create_admin(db, settings.admin_email, settings.admin_password, is_super_admin=True)
            logger.info("Default admin %s created", settings.admin_email)
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


app = FastAPI(title="ResultSheet", lifespan=lifespan)
app.add_middleware(SessionMiddleware, secret_key=settings.secret_key, session_cookie=settings.session_cookie)

# Mount static files
app.mount("/static", StaticFiles(directory=os.path.join(BASE_DIR, "static")), name="static")

templates = Jinja2Templates(directory=os.path.join(BASE_DIR, "templates"))

app.include_router(auth_router)
app.include_router(api_router)
app.include_router(views_router)


def error_response(request: Request, status_code: int, message: str, **extra):
    """JSON for API callers, the alert page for browsers."""
    if request.url.path.startswith("/api"):
        return JSONResponse(jsonable_encoder({"message": message, **extra}), status_code=status_code)
    return templates.TemplateResponse(request, "alert.html", {"error": message}, status_code=status_code)


@app.middleware("http")
async def error_handler(request: Request, call_next):
    try:
        return await call_next(request)
    except Exception:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return error_response(request, 500, "Internal server error")


@app.exception_handler(ResultsError)
async def results_error_handler(request: Request, exc: ResultsError):
    return error_response(request, exc.status_code, exc.message)


@app.exception_handler(OperationalError)
async def store_error_handler(request: Request, exc: OperationalError):
    logger.error("Database unavailable: %s", exc)
    return error_response(request, 503, "Database is temporarily unavailable")


# Handle HTTP exceptions (like 404)
@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return error_response(request, exc.status_code, str(exc.detail))


# Handle request validation errors
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return error_response(request, 400, "Validation error", errors=exc.errors())


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="127.0.0.1", port=8002)
