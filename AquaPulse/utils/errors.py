from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import IntegrityError


class AnalyticsError(Exception):
    """Error base del motor de analytics. Nunca se reintenta: siempre es un problema de entrada."""

    status_code = 400
    code = "analytics_error"

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationError(AnalyticsError):
    """Parámetros inválidos del llamador (season faltante, pond_a == pond_b, sin métricas...)."""

    status_code = 400
    code = "validation_error"


class NotFoundError(AnalyticsError):
    """La temporada o el estanque solicitado no existe."""

    status_code = 404
    code = "not_found"

    def __init__(self, resource: str):
        super().__init__(f"{resource} no encontrado")
        self.resource = resource


def _normalize_errors(errs):
    norm = []
    for e in errs:
        e = dict(e)
        val = e.get("input")
        if isinstance(val, (bytes, bytearray)):
            try:
                e["input"] = val.decode("utf-8", errors="ignore")
            except Exception:
                e["input"] = repr(val)
        e.pop("ctx", None)
        norm.append(e)
    return norm


def install_error_handlers(app: FastAPI):
    @app.exception_handler(AnalyticsError)
    async def analytics_handler(request: Request, exc: AnalyticsError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.code, "detail": exc.detail})

    @app.exception_handler(RequestValidationError)
    async def validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=422,
            content={"error": "validation_error", "detail": _normalize_errors(exc.errors())},
        )

    @app.exception_handler(IntegrityError)
    async def integrity_handler(request: Request, exc: IntegrityError):
        return JSONResponse(status_code=409, content={"error": "conflict", "detail": str(exc.orig)})
