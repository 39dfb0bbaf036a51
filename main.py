import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from authx.exceptions import AuthXException, MissingTokenError, JWTDecodeError
from contextlib import asynccontextmanager

from config import settings, setup_logging
from errors import AppError
from limiter import limiter
from endpoints.endpoints_auth import router_auth
from endpoints.endpoints_users import router_users
from endpoints.endpoints_notes import router_notes
from database import db

logger = logging.getLogger(__name__)


# lifespan (before yield - on start, after yield - on exit)
@asynccontextmanager
async def lifespan(
    app: FastAPI,
):
    setup_logging()
    await db.create_all_tables()
    logger.info("Database tables ready")
    yield
    await db.get_engine().dispose()


app = FastAPI(
    title="Notes",
    description="Keep personal notes and checklists, tag them and restore them from trash",
    summary="Notes and checklists manager",
    lifespan=lifespan,
    version="1.0",
)

app.state.limiter = limiter

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(AppError)
def app_error_handler(request: Request, exc: AppError):
    logger.info(
        "%s %s -> %s %s", request.method, request.url.path, exc.status_code, exc.message
    )
    return JSONResponse(exc.message, exc.status_code)


@app.exception_handler(MissingTokenError)
def missing_token_error_handler(request: Request, exc: MissingTokenError):
    return JSONResponse("Access token not found", 401)


@app.exception_handler(JWTDecodeError)
def jwt_decode_token_error_handler(request: Request, exc: JWTDecodeError):
    if "expired" in str(exc):
        return JSONResponse("Token is expired", 401)
    else:
        return JSONResponse("Token decode error", 401)


@app.exception_handler(AuthXException)
def authx_error_handler(request: Request, exc: AuthXException):
    return JSONResponse("Unauthorized", 401)


@app.exception_handler(Exception)
def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("Something went wrong [%s %s]", request.method, request.url.path)
    return JSONResponse("Something went wrong, try again later", 500)


@app.get("/", summary="Health check")
async def health():
    return {"status": "ok"}


app.include_router(router_auth)
app.include_router(router_users)
app.include_router(router_notes)
