from __future__ import annotations
import logging
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from .config import AccountSettings
from .deps import set_account_service
from .errors import AccountServiceError, InvalidInput
from .observability import RequestContextMiddleware, configure_logging
from .routes import auth_router, users_router
from .service import AccountService, build_account_service

log = logging.getLogger("accountservice.app")


async def _account_error_handler(request: Request, exc: AccountServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        log.error("request.error", extra={"code": exc.code, "path": request.url.path})
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = {"errors": [{"loc": list(e.get("loc", ())), "msg": e.get("msg", "")} for e in exc.errors()]}
    err = InvalidInput(details=details)
    return JSONResponse(status_code=err.status_code, content=err.to_payload())


def create_app(cfg: Optional[AccountSettings] = None, service: Optional[AccountService] = None) -> FastAPI:
    """Build the HTTP app. Settings are read once here; bad secrets fail startup."""
    cfg = cfg or AccountSettings()
    configure_logging(cfg.LOG_LEVEL)
    set_account_service(service or build_account_service(cfg))

    app = FastAPI(title=cfg.APP_NAME, version=cfg.APP_VERSION)
    app.add_middleware(RequestContextMiddleware, cookie_name=cfg.AUTH_COOKIE_NAME)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(AccountServiceError, _account_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)

    # Routers
    app.include_router(auth_router)
    app.include_router(users_router)

    @app.get("/health")
    def health():
        return {"ok": True}

    return app
