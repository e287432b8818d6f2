from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from htmlfy.env import config_from_env, max_input_chars
from htmlfy.formatting.config import FormatConfig
from htmlfy.formatting.errors import HtmlfyError
from htmlfy.formatting.fixer import format_html
from htmlfy.formatting.rules import ignore_element, is_html, trimify
from htmlfy.formatting.validate import validate_config
from htmlfy.logging_setup import ensure_file_logging, log_dir_from_env
from htmlfy.models import (
    ConfigOut,
    ConfigResponse,
    ErrorEnvelope,
    FormatRequest,
    FormatResponse,
    HtmlResponse,
    IgnoreRequest,
    IsHtmlRequest,
    IsHtmlResponse,
    TrimRequest,
    ValidateConfigRequest,
)

logger = logging.getLogger(__name__)


def _default_log_dir() -> Path:
    # Relative to where the server is started, not to the installed package.
    return Path.cwd() / "output" / "logs"


def _error_code_for_status(status_code: int) -> str:
    if status_code == 404:
        return "not_found"
    if status_code == 413:
        return "payload_too_large"
    if status_code in {400, 422}:
        return "bad_request"
    return "internal_error"


def _error(status_code: int, message: str, *, code: str | None = None, field: str | None = None) -> JSONResponse:
    envelope = ErrorEnvelope(code=code or _error_code_for_status(status_code), message=message, field=field)
    return JSONResponse(
        status_code=status_code,
        content={"error": envelope.model_dump(exclude_none=True)},
    )


def _check_input_size(*texts: str) -> None:
    limit = max_input_chars()
    total = sum(len(t) for t in texts)
    if total > limit:
        raise HTTPException(status_code=413, detail=f"input too large (> {limit} chars)")


def _base_config() -> FormatConfig:
    # Read per request so HTMLFY_CONFIG changes (and test monkeypatching) apply.
    return config_from_env()


@asynccontextmanager
async def _lifespan(_app: FastAPI) -> AsyncIterator[None]:
    log_file = ensure_file_logging(log_dir=log_dir_from_env(_default_log_dir()))
    logger.info("file logging enabled: %s", log_file)
    yield


app = FastAPI(lifespan=_lifespan)


@app.exception_handler(HtmlfyError)
async def _htmlfy_exception_handler(_request: Request, exc: HtmlfyError):
    logger.info("rejected input: %s", exc.message)
    return _error(400, exc.message, code=exc.code, field=exc.field)


@app.exception_handler(HTTPException)
async def _http_exception_handler(_request: Request, exc: HTTPException):
    return _error(int(exc.status_code), str(exc.detail))


@app.exception_handler(RequestValidationError)
async def _validation_exception_handler(_request: Request, exc: RequestValidationError):
    msg = "bad request"
    errors = exc.errors()
    if errors:
        msg = errors[0].get("msg") or msg
    return _error(400, msg)


@app.exception_handler(Exception)
async def _unhandled_exception_handler(_request: Request, exc: Exception):
    logger.exception("unhandled error")
    return _error(500, str(exc))


@app.get("/healthz")
async def healthz():
    return {"ok": True}


@app.get("/api/v1/config/default", response_model=ConfigResponse)
async def get_default_config():
    return ConfigResponse(config=ConfigOut.from_config(_base_config()))


# Scanning routes are plain `def` so FastAPI runs them in its threadpool.
@app.post("/api/v1/config/validate", response_model=ConfigResponse)
def post_validate_config(req: ValidateConfigRequest):
    cfg = validate_config(req.config, defaults=_base_config())
    return ConfigResponse(config=ConfigOut.from_config(cfg))


@app.post("/api/v1/is-html", response_model=IsHtmlResponse)
def post_is_html(req: IsHtmlRequest):
    _check_input_size(req.content)
    return IsHtmlResponse(is_html=is_html(req.content))


@app.post("/api/v1/ignore", response_model=HtmlResponse)
def post_ignore(req: IgnoreRequest):
    _check_input_size(req.html)
    overrides: dict = {}
    if req.ignore is not None:
        overrides["ignore"] = req.ignore
    if req.ignore_with is not None:
        overrides["ignore_with"] = req.ignore_with
    # Run through the validator so ignore_with gets the same checks as the config endpoint.
    cfg = validate_config(overrides, defaults=_base_config())
    return HtmlResponse(html=ignore_element(req.html, cfg.ignore, req.mode, cfg.ignore_with))


@app.post("/api/v1/trim", response_model=HtmlResponse)
def post_trim(req: TrimRequest):
    _check_input_size(req.html)
    return HtmlResponse(html=trimify(req.html, req.trim))


@app.post("/api/v1/format", response_model=FormatResponse)
def post_format(req: FormatRequest):
    _check_input_size(req.html)
    cfg = validate_config(req.config, defaults=_base_config())
    result = format_html(req.html, cfg)
    logger.info("formatted %s chars: %s", len(req.html), result.stats)
    return FormatResponse(html=result.text, stats=result.stats)
