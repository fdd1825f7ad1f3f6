import asyncio
import logging

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

# Configure root logger to show INFO for our application modules
logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
# Suppress noisy third-party loggers
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)

from autoclinic.core.auth import warn_if_insecure_secret
from autoclinic.core.config import settings
from autoclinic.core.database import engine, Base, SessionLocal
from autoclinic.api import auth, health, profile, reset_page, support
from autoclinic.api import customers as customers_api
from autoclinic.api import shifts as shifts_api
from autoclinic.api import workers as workers_api
from autoclinic.services.reset_tokens import purge_expired_tokens

# Import all models so Base.metadata knows about them
from autoclinic.models import user, employee, password_reset, customer, shift  # noqa: F401

logger = logging.getLogger(__name__)

warn_if_insecure_secret()

# Create all tables
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
)

_cors_origins = [settings.FRONTEND_URL]
if settings.DEBUG:
    _cors_origins += ["http://localhost:8081", "http://127.0.0.1:8081", "http://localhost:19006"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ─── Error bodies are always {"error": message} ───
@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    else:
        message = "Invalid request"
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Server error"})


# Routes
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(reset_page.router)
app.include_router(profile.router)
app.include_router(workers_api.router)
app.include_router(shifts_api.router)
app.include_router(customers_api.router)
app.include_router(support.router)


@app.get("/")
def root():
    return {"message": f"{settings.APP_NAME} API Running"}


def _purge_once() -> int:
    db = SessionLocal()
    try:
        return purge_expired_tokens(db)
    finally:
        db.close()


async def _purge_expired_tokens_loop():
    """Stand-in for a database TTL index: sweep expired reset tokens periodically."""
    while True:
        await asyncio.sleep(settings.RESET_TOKEN_PURGE_INTERVAL_SECONDS)
        try:
            await run_in_threadpool(_purge_once)
        except Exception as e:
            logger.error("Reset token purge failed: %s", e)


@app.on_event("startup")
async def startup_event():
    await run_in_threadpool(_purge_once)
    app.state.purge_task = asyncio.create_task(_purge_expired_tokens_loop())


@app.on_event("shutdown")
async def shutdown_event():
    task = getattr(app.state, "purge_task", None)
    if task is not None:
        task.cancel()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8081)
