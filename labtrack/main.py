import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path

from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from labtrack.config import settings
from labtrack.database import engine
from labtrack.models import parameter, reference_standard, sample  # noqa: F401
from labtrack.routers import conformity, parameters, reference_standards, samples
from labtrack.schemas.reference_standard import ConditionType
from labtrack.seed.reference_seed import seed_reference_data

logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger(__name__)


def _assert_database_at_head() -> None:
    project_root = Path(__file__).resolve().parent.parent
    alembic_cfg = Config(str(project_root / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(project_root / "alembic"))
    script = ScriptDirectory.from_config(alembic_cfg)
    expected_heads = set(script.get_heads())

    with engine.connect() as connection:
        context = MigrationContext.configure(connection)
        current_heads = set(context.get_current_heads())

    if current_heads != expected_heads:
        raise RuntimeError(
            "Database schema is not at Alembic head. "
            "Run `alembic upgrade head` before starting the API. "
            f"Current revisions: {sorted(current_heads) or ['<none>']}, "
            f"expected: {sorted(expected_heads)}."
        )


API_VERSION = "0.1.0"
SERVICE_NAME = "labtrack"

_ERROR_NAMES = {
    400: "BadRequest",
    404: "NotFound",
    405: "MethodNotAllowed",
    422: "ValidationError",
}


@asynccontextmanager
async def lifespan(_: FastAPI):
    _assert_database_at_head()
    if settings.seed_on_startup:
        seed_reference_data()
    logger.info("Conformity service ready (env=%s)", settings.app_env)
    yield


app = FastAPI(title="Lab Sample Conformity API", version=API_VERSION, lifespan=lifespan)

allowed_origins = [origin.strip() for origin in settings.allowed_origins.split(",") if origin.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
def root():
    return {
        "statusCode": 200,
        "message": "Success",
        "data": {
            "service": SERVICE_NAME,
            "version": API_VERSION,
            "description": "Checks laboratory sample results against reference standards",
            "condition_types": [condition_type.value for condition_type in ConditionType],
            "endpoints": {
                "reference_standards": "/api/reference-standards",
                "parameters": "/api/parameters",
                "samples": "/api/samples",
                "conformity": "/api/conformity",
            },
        },
    }


@app.get("/health")
def health():
    return {
        "status": "ok",
        "service": SERVICE_NAME,
        "version": API_VERSION,
        "env": settings.app_env,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


def _error_name(status_code: int) -> str:
    if status_code >= 500:
        return "InternalServerError"
    return _ERROR_NAMES.get(status_code, "HTTPError")


@app.exception_handler(HTTPException)
async def http_exception_handler(_: Request, exc: HTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "statusCode": exc.status_code,
            "message": str(exc.detail) if exc.detail else "Request failed",
            "error": _error_name(exc.status_code),
        },
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(_: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=422,
        content={
            "statusCode": 422,
            "message": "Invalid request payload",
            "error": "ValidationError",
            "details": {"errors": jsonable_errors(exc)},
        },
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    # pydantic error contexts may carry exception objects that JSONResponse cannot encode.
    return [{key: value for key, value in error.items() if key != "ctx"} for error in exc.errors()]


@app.exception_handler(Exception)
async def unhandled_exception_handler(_: Request, exc: Exception):
    logger.exception("Unhandled server error: %s", exc)
    return JSONResponse(
        status_code=500,
        content={
            "statusCode": 500,
            "message": str(exc) or "An unexpected error occurred",
            "error": "InternalServerError",
        },
    )


app.include_router(reference_standards.router)
app.include_router(parameters.router)
app.include_router(samples.router)
app.include_router(conformity.router)


def run() -> None:
    import uvicorn

    uvicorn.run("labtrack.main:app", host=settings.app_host, port=settings.app_port)
