from app.routes.auth import router as auth_router
from app.routes.dashboard import router as dashboard_router
from app.routes.notes import router as notes_router
from app.routes.summaries import router as summaries_router
from app.routes.summarize import router as summarize_router

__all__ = [
    'auth_router',
    'dashboard_router',
    'notes_router',
    'summaries_router',
    'summarize_router',
]
