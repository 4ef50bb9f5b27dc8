"""
QuoteDesk API application setup.

- Registers route modules from `routes/*` under `/api`
- Maps the QuoteDeskError hierarchy to structured JSON error bodies
- Creates missing tables on startup
"""

import logging

from dotenv import load_dotenv  # type: ignore
from fastapi import FastAPI, Request  # type: ignore
from fastapi.exceptions import RequestValidationError  # type: ignore
from fastapi.middleware.cors import CORSMiddleware  # type: ignore
from fastapi.responses import JSONResponse  # type: ignore

from config import get_config
from logging_config import configure_logging, get_logger_levels
from shared.exceptions import QuoteDeskError, create_error_response, handle_exception, status_code_for

from routes.quotations import router as quotations_router
from routes.business_identities import router as business_identities_router
from routes.customers import router as customers_router

# ───────────────────── env / init ─────────────────────
load_dotenv()
configure_logging()

_LOG = logging.getLogger(__name__)
_config = get_config()

app = FastAPI(
    title=_config.app_name,
    version=_config.app_version,
    description="Quotation consistency and lifecycle service",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_config.server.allowed_origins,
    allow_credentials="*" not in _config.server.allowed_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

_API_PREFIX = _config.server.api_prefix
app.include_router(quotations_router, prefix=_API_PREFIX)
app.include_router(business_identities_router, prefix=_API_PREFIX)
app.include_router(customers_router, prefix=_API_PREFIX)


# ───────────────────── error handlers ─────────────────────
@app.exception_handler(QuoteDeskError)
def _quotedesk_error(request: Request, exc: QuoteDeskError) -> JSONResponse:
    handle_exception(exc, _LOG, context={"path": request.url.path, "method": request.method})
    return JSONResponse(status_code=status_code_for(exc), content=create_error_response(exc))


@app.exception_handler(RequestValidationError)
def _request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        problems.append({"field": location, "message": err.get("msg")})
    first = problems[0] if problems else {"field": None, "message": "Invalid request"}
    return JSONResponse(
        status_code=400,
        content={
            "error": f"{first['field']}: {first['message']}" if first["field"] else first["message"],
            "code": "validation_error",
            "field": first["field"],
            "errors": problems,
        },
    )


@app.exception_handler(Exception)
def _unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    handle_exception(exc, _LOG, context={"path": request.url.path, "method": request.method})
    return JSONResponse(status_code=500, content=create_error_response(exc))


# ───────────────────── lifecycle ─────────────────────
@app.on_event("startup")
def _run_startup() -> None:
    # Delegate startup tasks to dedicated module to keep app.py clean
    from startup import run_startup_tasks
    run_startup_tasks()


@app.get(f"{_API_PREFIX}/health")
def health() -> dict:
    return {
        "status": "ok",
        "version": app.version,
        "environment": _config.environment,
        "currency": _config.quotations.currency,
        "loggers": get_logger_levels(),
    }
