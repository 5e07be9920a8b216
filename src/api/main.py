"""FastAPI application exposing the patch decision engine."""

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from api.schema import EvaluateTextRequest, GeneratePatchRequest, PatchResponse
from common.constants import SERVICE_NAME, SERVICE_VERSION
from common.env import env
from common.logger import error, get_logger, setup_logging
from patching.engine import PatchDecisionEngine
from patching.errors import ConfigurationError
from patching.models import EngineConfig, ErrorKind, Failed, PatchOutcome

logger = get_logger(__name__)

app = FastAPI(
    title=SERVICE_NAME,
    description="Decides whether a new text version ships as a unified patch or a full download",
    version=SERVICE_VERSION,
)

# Failed outcomes map to these statuses; Accepted and Rejected are 200
ERROR_STATUS = {
    ErrorKind.INPUT_UNREADABLE: 400,
    ErrorKind.PERSIST_FAILURE: 500,
}

CONFIGURATION_ERROR = "configuration_error"


def get_engine() -> PatchDecisionEngine:
    """Engine configured from the environment, one per request."""
    return PatchDecisionEngine(EngineConfig.from_env())


def outcome_response(outcome: PatchOutcome) -> JSONResponse:
    status_code = ERROR_STATUS[outcome.error_kind] if isinstance(outcome, Failed) else 200
    return JSONResponse(
        status_code=status_code,
        content=PatchResponse.from_outcome(outcome).to_wire(),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are unreadable input, not a crash."""
    messages = "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
    logger.warning(f"Invalid request to {request.url.path}: {messages}")
    response = PatchResponse.error_response(messages, reason=ErrorKind.INPUT_UNREADABLE.value)
    return JSONResponse(status_code=400, content=response.to_wire())


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    """A bad environment fails every request the same way, with the setting named."""
    logger.error(f"Configuration error while serving {request.url.path}: {exc}")
    response = PatchResponse.error_response(str(exc), reason=CONFIGURATION_ERROR)
    return JSONResponse(status_code=500, content=response.to_wire())


@app.get("/")
def root():
    """Root endpoint with API information."""
    return {
        "name": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "endpoints": ["/health", "/version", "/api/generate-patch", "/api/evaluate"],
        "docs": "/docs",
    }


@app.get("/health")
def health():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/version")
def version():
    """Service name and version."""
    return {"service": SERVICE_NAME, "version": SERVICE_VERSION}


@app.post("/api/generate-patch")
def generate_patch(
    request: GeneratePatchRequest,
    engine: PatchDecisionEngine = Depends(get_engine),
):
    """Patch two files readable by the server."""
    for label, path in (("Old", request.old_file), ("New", request.new_file)):
        if not path.is_file():
            response = PatchResponse.error_response(
                f"{label} file does not exist: {path}",
                reason=ErrorKind.INPUT_UNREADABLE.value,
            )
            return JSONResponse(status_code=400, content=response.to_wire())

    outcome = engine.evaluate_files(
        request.old_file,
        request.new_file,
        persist_to=request.output_dir,
        include_content=request.include_content,
    )
    return outcome_response(outcome)


@app.post("/api/evaluate")
def evaluate_text(
    request: EvaluateTextRequest,
    engine: PatchDecisionEngine = Depends(get_engine),
):
    """Patch two texts sent inline."""
    outcome = engine.evaluate(
        request.old_text,
        request.new_text,
        persist_to=request.output_dir,
        include_content=request.include_content,
    )
    return outcome_response(outcome)


def run() -> None:
    """Serve the API with uvicorn on API_HOST:API_PORT."""
    setup_logging()
    try:
        EngineConfig.from_env()
    except ConfigurationError as e:
        error(f"Cannot start {SERVICE_NAME}: {e}")
        raise SystemExit(1) from e

    uvicorn.run(app, host=env.api_host(), port=env.api_port(), log_config=None)


if __name__ == "__main__":
    run()
