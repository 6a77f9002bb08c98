import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.config import get_settings
from backend.errors import register_error_handlers
from backend.meetings.routes import router as meetings_router
from backend.processing.routes import router as processing_router

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

app = FastAPI(title=settings.app_name)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[str(origin).rstrip("/") for origin in settings.cors_origins],
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)
register_error_handlers(app)

app.include_router(meetings_router, prefix="/api", tags=["meetings"])
app.include_router(processing_router, prefix="/api/groq", tags=["processing"])


@app.get("/health")
def health_check():
    return {"status": "ok"}


def run() -> None:
    import uvicorn

    uvicorn.run("backend.main:app", host=settings.api_host, port=settings.api_port, reload=settings.api_debug)
