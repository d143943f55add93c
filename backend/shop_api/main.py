"""
Shop API - Backend service
E-commerce backend: customers, staff, orders, products and inventory
"""
import json
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables before settings are read
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(env_path)

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.middleware.gzip import GZipMiddleware
from starlette.middleware.sessions import SessionMiddleware

from shop_api.api import auth, customers, internal, staff
from shop_api.core import database
from shop_api.core.auth import (
    JWT_CUSTOMER,
    JWT_STAFF,
    JWT_STAFF_WITHOUT_ROLE,
    MASTER_KEY,
    customer_strategy,
    internal_strategy,
    register_strategy,
    staff_strategy,
    staff_strategy_without_role,
)
from shop_api.core.config import ALLOWED_ORIGINS, settings
from shop_api.core.errors import not_found, register_error_handlers
from shop_api.core.health import health_check
from shop_api.core.logging import configure_logging
from shop_api.core.middleware import AccessLogMiddleware, ErrorHandlerMiddleware, SecurityHeadersMiddleware
from shop_api.core.sentry import init_sentry
# Importing the models registers every collection
from shop_api.models import register_models

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

# Sentry must be initialized before the app is created
init_sentry(settings)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if database.connect():
        register_models(database.get_database())
    yield
    database.close()


app = FastAPI(
    title=settings.API_TITLE,
    version=settings.API_VERSION,
    description=settings.API_DESCRIPTION,
    docs_url="/api-docs",
    openapi_url="/api-docs/openapi.json",
    redoc_url=None,
    lifespan=lifespan,
)

# Authentication strategies, selected per route with authenticate(name)
register_strategy(JWT_CUSTOMER, customer_strategy)
register_strategy(JWT_STAFF, staff_strategy)
register_strategy(MASTER_KEY, internal_strategy)
register_strategy(JWT_STAFF_WITHOUT_ROLE, staff_strategy_without_role)

# Middleware: the last one added runs first.
# Request order: access log -> gzip -> session -> security headers -> CORS -> errors
app.add_middleware(ErrorHandlerMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.SESSION_SECRET,
    session_cookie="shop_session",
    same_site="lax",
    https_only=settings.is_production,
)
app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(AccessLogMiddleware)

register_error_handlers(app)


def health_response() -> JSONResponse:
    if health_check():
        return JSONResponse(status_code=status.HTTP_200_OK, content={"status": "UP"})
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"status": "DOWN"})


@app.get("/", tags=["Health"])
def root():
    """Liveness probe"""
    return health_response()


# Primary API routes
app.include_router(auth.router, prefix="/api")
app.include_router(customers.router, prefix="/api")
app.include_router(staff.router, prefix="/api")
app.include_router(internal.router, prefix="/api")


@app.get("/_health", tags=["Health"])
def health():
    """Liveness probe"""
    return health_response()


@app.get("/callback", include_in_schema=False)
def payment_callback(request: Request):
    """Payment gateway return URL: echoes the query string"""
    query = {}
    for key in request.query_params:
        values = request.query_params.getlist(key)
        query[key] = values if len(values) > 1 else values[0]
    logger.info(f"Query: {json.dumps(query)}")
    return query


@app.get("/debug-sentry", include_in_schema=False)
def debug_sentry():
    """Raises on purpose to check the error monitoring setup"""
    raise Exception("My first Sentry error!")


ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]


@app.api_route("/robots.txt", methods=ALL_METHODS, include_in_schema=False)
def robots_txt():
    return PlainTextResponse("User-agent: *\nDisallow: /")


# Must stay the last route: anything unmatched gets the 404 envelope
@app.api_route("/{full_path:path}", methods=ALL_METHODS, include_in_schema=False)
def route_not_found(full_path: str):
    raise not_found()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("shop_api.main:app", host=settings.HOST, port=settings.PORT)
