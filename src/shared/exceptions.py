from typing import Any, Dict, Optional
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi import status
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.shared.error_codes import ERROR_CODES
from src.shared.logging import get_correlation_id, get_logger

log = get_logger("errors")


# ───────────────────────── Base & Domain Exceptions ─────────────────────────
class DomainError(Exception):
    """Base class for domain-level errors. Services should raise these, never HTTPException."""
    code: str = "domain_error"
    status_code: int = status.HTTP_400_BAD_REQUEST
    message: str
    details: Optional[Dict[str, Any]]

    def __init__(
        self,
        message: str = "",
        *,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code
        self.message = message or _msg_for(self.code)
        self.details = details
        super().__init__(self.message)


class ValidationError(DomainError):
    code = "validation_error"
    status_code = status.HTTP_400_BAD_REQUEST


class UnauthorizedError(DomainError):
    code = "unauthorized"
    status_code = status.HTTP_401_UNAUTHORIZED


class InvalidTokenError(DomainError):
    # the token issuer's clients expect 400 for a bad signature, not 401
    code = "invalid_token"
    status_code = status.HTTP_400_BAD_REQUEST


class ForbiddenError(DomainError):
    code = "forbidden"
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(DomainError):
    # generic; set a specific code via constructor (e.g., "blog_not_found")
    code = "not_found"
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(DomainError):
    code = "conflict"
    status_code = status.HTTP_400_BAD_REQUEST


class ExternalServiceError(DomainError):
    code = "media_error"
    status_code = status.HTTP_502_BAD_GATEWAY


# ───────────────────────────── Helpers ──────────────────────────────────────

def _problem(
    code: str,
    message: str,
    details: Optional[Dict[str, Any]],
    correlation_id: Optional[str],
) -> Dict[str, Any]:
    body: Dict[str, Any] = {"code": code, "message": message}
    if details:
        body["details"] = details
    if correlation_id:
        body["correlation_id"] = correlation_id
    return body


def _extract_correlation_id(req: Request) -> Optional[str]:
    return getattr(getattr(req, "state", None), "correlation_id", None) or get_correlation_id()


def _http_for(code: str) -> int:
    return int(ERROR_CODES.get(code, {}).get("http", status.HTTP_500_INTERNAL_SERVER_ERROR))


def _msg_for(code: str) -> str:
    return str(ERROR_CODES.get(code, {}).get("message", code))


# first ERROR_CODES entry per HTTP status, for framework-raised HTTP errors
_CODE_FOR_STATUS: Dict[int, str] = {}
for _code, _entry in ERROR_CODES.items():
    _CODE_FOR_STATUS.setdefault(int(_entry["http"]), _code)


def _json(status_code: int, body: Dict[str, Any]) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))

# ─────────────────────────── Registration ───────────────────────────

def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(DomainError)
    async def handle_app_error(req: Request, exc: DomainError):
        if exc.status_code >= 500:
            log.warning("domain_error", code=exc.code, path=req.url.path, details=exc.details)
        return _json(
            exc.status_code,
            _problem(exc.code, exc.message, exc.details, _extract_correlation_id(req)),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(req: Request, exc: RequestValidationError):
        code = "validation_error"
        return _json(
            _http_for(code),
            _problem(code, _msg_for(code), {"errors": exc.errors()}, _extract_correlation_id(req)),
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(req: Request, exc: StarletteHTTPException):
        code = _CODE_FOR_STATUS.get(exc.status_code, "http_error")
        detail = getattr(exc, "detail", None)
        details = detail if isinstance(detail, dict) else None
        message = detail if isinstance(detail, str) else _msg_for(code)
        return _json(exc.status_code, _problem(code, message, details, _extract_correlation_id(req)))

    @app.exception_handler(Exception)
    async def handle_unhandled(req: Request, exc: Exception):
        code = "internal_error"
        log.exception("unhandled_error", path=req.url.path, error_type=exc.__class__.__name__)
        return _json(
            _http_for(code),
            _problem(code, str(exc) or _msg_for(code), {"type": exc.__class__.__name__}, _extract_correlation_id(req)),
        )
