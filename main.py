import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from fastapi.middleware.cors import CORSMiddleware

from healthchat.core.config import get_frontend_origins, get_log_level
from healthchat.core.errors import HealthChatError
from healthchat.core.session_context import get_session_registry
from healthchat.db.session import engine, Base
from healthchat.models import User, PasswordResetToken, Symptom, Mood, Meal, Medication  # noqa: F401
from healthchat.api.auth import router as auth_router
from healthchat.api.session import router as session_router
from healthchat.api.conversations import router as conversations_router
from healthchat.api.records import router as records_router
from healthchat.api.analysis import router as analysis_router
from healthchat.api.settings import router as settings_router
from healthchat.api.voice import router as voice_router

logging.basicConfig(
    level=get_log_level(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger("healthchat")

app = FastAPI(title="HealthChat API")


@app.middleware("http")
async def add_noindex_header(request: Request, call_next):
    """Keep personal health endpoints out of search engines."""
    response = await call_next(request)
    response.headers["X-Robots-Tag"] = "noindex, nofollow"
    return response


@app.get("/robots.txt", include_in_schema=False)
async def robots_txt():
    return Response(
        content="User-agent: *\nDisallow: /\n",
        media_type="text/plain",
    )


@app.exception_handler(HealthChatError)
async def healthchat_error_handler(request: Request, exc: HealthChatError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


origins = get_frontend_origins()
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=origins != ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# Create tables
Base.metadata.create_all(bind=engine)


@app.on_event("shutdown")
def shutdown_sessions():
    get_session_registry().clear()
    logger.info("Session registry cleared")


# Include routers
app.include_router(auth_router)
app.include_router(session_router)
app.include_router(conversations_router)
app.include_router(records_router)
app.include_router(analysis_router)
app.include_router(settings_router)
app.include_router(voice_router)


@app.get("/health")
def health():
    return {"ok": True}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
