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
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.orm import Session
from database import get_db
from crud_ops import authenticate_admin, get_admin
from exceptions import AuthError, PermissionDeniedError
import schemas
import bleach
import html

logger = logging.getLogger(__name__)

router = APIRouter()
templates = Jinja2Templates(directory=os.path.join(os.path.dirname(__file__), "templates"))

SESSION_KEY = "admin_id"


def clean_text(value):
    """Strip markup from user input while keeping the text itself as typed."""
    return html.unescape(bleach.clean(value, strip=True)) if isinstance(value, str) else value


def get_current_admin(request: Request, db: Session = Depends(get_db)):
    admin_id = request.session.get(SESSION_KEY)
    if admin_id is None:
        return None

    admin = get_admin(db, int(admin_id))
    if not admin:
        # Admin was removed after logging in
        request.session.pop(SESSION_KEY, None)
        return None

    return admin


def require_admin(admin=Depends(get_current_admin)):
    """Dependency for every mutating endpoint."""
    if admin is None:
        raise AuthError()
    return admin


def require_super_admin(admin=Depends(require_admin)):
    if not admin.is_super_admin:
        raise PermissionDeniedError()
    return admin


def _login(request: Request, db: Session, email: str, password: str):
    email = clean_text(email or "").strip()
    admin = authenticate_admin(db, email, password or "") if email else None
    if not admin:
        request.session.pop(SESSION_KEY, None)
        logger.warning("Failed login attempt for %s", email)
        return None

    request.session[SESSION_KEY] = admin.id
    logger.info("Admin %s logged in", admin.email)
    return admin


@router.post("/api/login", response_model=schemas.Admin)
def api_login(credentials: schemas.LoginRequest, request: Request, db: Session = Depends(get_db)):
    admin = _login(request, db, credentials.email, credentials.password)
    if not admin:
        raise AuthError("Invalid credentials")
    return admin


@router.post("/api/logout")
def api_logout(request: Request):
    request.session.pop(SESSION_KEY, None)
    return {"ok": True}


@router.get("/api/user", response_model=schemas.Admin)
def current_user(admin=Depends(require_admin)):
    return admin


@router.get("/login")
def login_page(request: Request):
    return templates.TemplateResponse(request, "login.html", {})


@router.post("/login")
async def login(request: Request, db: Session = Depends(get_db)):
    form_data = await request.form()
    admin = _login(request, db, form_data.get("email", ""), form_data.get("password", ""))
    if not admin:
        return templates.TemplateResponse(
            request,
            "login.html",
            {"error": "Invalid email or password"},
            status_code=status.HTTP_401_UNAUTHORIZED,
        )
    return RedirectResponse(url="/sessions", status_code=302)


@router.get("/logout")
def logout(request: Request):
    request.session.pop(SESSION_KEY, None)
    return RedirectResponse(url="/", status_code=302)
