import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from jobtrack.config import settings
from jobtrack.database import init_db, engine
from jobtrack.logging_config import setup_logging
from jobtrack.routers import analytics, applications, auth, open_jobs, reminders

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title="JobTrack API",
    description="Job application tracking and open-jobs feed.",
    version="1.0.0",
)

cors_origins = [o.strip() for o in settings.cors_allow_origins.split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(applications.router)
app.include_router(reminders.router)
app.include_router(analytics.router)
app.include_router(open_jobs.router)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request, exc):
    logger.exception("Unhandled server error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


@app.get("/health/live")
def health_live():
    return {"status": "ok"}


@app.get("/health/ready")
def health_ready():
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return {"status": "ready"}
    except Exception:
        logger.exception("Readiness check failed")
        return JSONResponse(status_code=503, content={"status": "not_ready"})


@app.on_event("startup")
def on_startup():
    logger.info("Starting JobTrack API")
    env = (settings.app_env or "development").lower()
    if env in {"production", "prod"}:
        if settings.secret_key == "replace-with-a-long-random-secret-key":
            raise RuntimeError("SECRET_KEY placeholder is not allowed in production")
        if not settings.serpapi_key:
            logger.warning("SERPAPI_KEY is not set; open-jobs ingestion will fail until it is configured.")
    elif settings.secret_key == "replace-with-a-long-random-secret-key":
        logger.warning("SECRET_KEY is using placeholder default. Set SECRET_KEY in .env for secure deployments.")
    init_db()


@app.get("/")
def root():
    return {"message": "JobTrack API. See /docs for endpoints."}
