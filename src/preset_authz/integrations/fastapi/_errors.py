"""Exception handlers for FastAPI integration."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from preset_authz.exceptions import (
    AccessDenied,
    AccessEvaluationError,
    ConstraintValidationError,
    InvalidConstraintDataError,
    PresetNotFoundError,
)

__all__ = ["install_error_handlers"]


def install_error_handlers(app: FastAPI) -> None:
    """Install exception handlers for preset-authz errors on a FastAPI app.

    Converts preset access exceptions into HTTP responses:

    - ``ConstraintValidationError`` -> 422 Unprocessable Entity
    - ``AccessDenied`` -> 403 Forbidden
    - ``AccessEvaluationError`` -> 403 Forbidden (fail-closed)
    - ``PresetNotFoundError`` -> 404 Not Found

    Args:
        app: The FastAPI application instance.

    Example::

        from fastapi import FastAPI
        from preset_authz.integrations.fastapi import install_error_handlers

        app = FastAPI()
        install_error_handlers(app)
    """

    @app.exception_handler(ConstraintValidationError)
    async def constraint_validation_handler(  # pyright: ignore[reportUnusedFunction]
        request: object, exc: ConstraintValidationError
    ) -> JSONResponse:
        content: dict[str, object] = {"detail": str(exc)}
        if isinstance(exc, InvalidConstraintDataError) and exc.errors:
            content["errors"] = [
                {"loc": list(e.get("loc", ())), "msg": e.get("msg", "")} for e in exc.errors
            ]
        return JSONResponse(status_code=422, content=content)

    @app.exception_handler(AccessDenied)
    async def access_denied_handler(  # pyright: ignore[reportUnusedFunction]
        request: object, exc: AccessDenied
    ) -> JSONResponse:
        return JSONResponse(
            status_code=403,
            content={"detail": str(exc)},
        )

    @app.exception_handler(AccessEvaluationError)
    async def evaluation_error_handler(  # pyright: ignore[reportUnusedFunction]
        request: object, exc: AccessEvaluationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=403,
            content={"detail": "Access denied", "reason": exc.reason},
        )

    @app.exception_handler(PresetNotFoundError)
    async def not_found_handler(  # pyright: ignore[reportUnusedFunction]
        request: object, exc: PresetNotFoundError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=404,
            content={"detail": str(exc)},
        )
