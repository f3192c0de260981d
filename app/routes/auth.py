from urllib.parse import quote

from fastapi import APIRouter, Request, Depends, Form
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.orm import Session

from app.database import get_db
from app.auth import (
    authenticate_user,
    set_session_cookie,
    clear_session_cookie,
    get_current_user,
    hash_password,
)
from app.models.user import User
from app.services.validators import validate_signup
from app.template_config import templates
from app.utils.safe_redirect import safe_redirect_url

router = APIRouter(tags=["auth"])


@router.get("/login", response_class=HTMLResponse)
async def login_page(
    request: Request,
    next: str = "/",
    error: str = None,
    db: Session = Depends(get_db)
):
    """Display login page."""
    next = safe_redirect_url(next)

    if get_current_user(request, db):
        return RedirectResponse(url=next, status_code=303)

    return templates.TemplateResponse(request, "auth/login.html", {
        "next": next,
        "error": error,
    })


@router.post("/login")
async def login(
    email: str = Form(...),
    password: str = Form(...),
    next: str = Form("/"),
    db: Session = Depends(get_db)
):
    """Process login form."""
    next = safe_redirect_url(next)
    user = authenticate_user(db, email, password)

    if not user:
        return RedirectResponse(
            url=f"/login?error=Invalid+email+or+password&next={quote(next, safe='/')}",
            status_code=303
        )

    response = RedirectResponse(url=next, status_code=303)
    set_session_cookie(response, user.id)
    return response


@router.get("/signup", response_class=HTMLResponse)
async def signup_page(request: Request, error: str = None):
    return templates.TemplateResponse(request, "auth/signup.html", {"error": error})


@router.post("/signup")
async def signup(
    request: Request,
    email: str = Form(...),
    password: str = Form(...),
    full_name: str = Form(None),
    db: Session = Depends(get_db)
):
    """Create an account and sign the new user in."""
    try:
        email = validate_signup(email, password)
    except ValueError as e:
        return templates.TemplateResponse(
            request, "auth/signup.html", {"error": str(e), "email": email}, status_code=400
        )

    if db.query(User).filter(User.email == email).first():
        return templates.TemplateResponse(
            request,
            "auth/signup.html",
            {"error": "An account with this email already exists", "email": email},
            status_code=400,
        )

    user = User(
        email=email,
        password_hash=hash_password(password),
        full_name=(full_name or "").strip() or None,
    )
    db.add(user)
    db.commit()

    response = RedirectResponse(url="/", status_code=303)
    set_session_cookie(response, user.id)
    return response


@router.get("/logout")
async def logout():
    """Log out the current user."""
    response = RedirectResponse(url="/login", status_code=303)
    clear_session_cookie(response)
    return response
