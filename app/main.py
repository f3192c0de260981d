import os
import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from dotenv import load_dotenv

load_dotenv()

from app.routes import (
    auth_router,
    dashboard_router,
    notes_router,
    summaries_router,
    summarize_router,
)
from app.database import init_db, DATABASE_URL
from app.services.errors import DaybookError
from app.template_config import templates

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

STATIC_DIR = os.path.join(os.path.dirname(__file__), "static")

# Create FastAPI app
app = FastAPI(
    title="Daybook",
    description="Daily journal with AI end-of-day summaries",
    version="1.0.0"
)

app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

# Include routers
app.include_router(auth_router)
app.include_router(dashboard_router)
app.include_router(notes_router)
app.include_router(summaries_router)
app.include_router(summarize_router)


@app.on_event("startup")
def on_startup():
    """Ensure the database is reachable and tables exist before serving."""
    try:
        init_db()
    except Exception as e:
        raise RuntimeError(
            f"Database initialization failed for DATABASE_URL={DATABASE_URL}: {e}"
        ) from e


def wants_html(request: Request) -> bool:
    return "text/html" in request.headers.get("accept", "")


def error_response(request: Request, status_code: int, message: str):
    """Uniform error body: {"error": message}, or an error page for browsers."""
    if wants_html(request):
        return templates.TemplateResponse(
            request,
            "errors/error.html",
            {"status_code": status_code, "message": message},
            status_code=status_code,
        )
    return JSONResponse({"error": message}, status_code=status_code)


# Error handlers
@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return error_response(request, exc.status_code, str(exc.detail))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return error_response(request, 400, "Invalid request")


@app.exception_handler(DaybookError)
async def service_error_handler(request: Request, exc: DaybookError):
    """Domain errors carry their own status; details stay in the logs."""
    if exc.status_code >= 500:
        logger.error("%s %s failed: %r", request.method, request.url.path, exc)
    return error_response(request, exc.status_code, str(exc))


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)
