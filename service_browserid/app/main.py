"""
BrowserID login service.

Hosts the BrowserID strategy behind ``POST /auth/browserid`` and translates
its outcome into an HTTP response.
"""

from typing import Any, Dict, Mapping, Optional

from fastapi import Request
from fastapi.responses import JSONResponse

from shared.base_service import BaseService
from shared.config import ServiceConfig, get_config
from shared.errors import BrowserIDException, ErrorResponse
from shared.logging import get_request_id

from .strategy import (
    BrowserIDStrategy,
    Error,
    Fail,
    OutcomeRecorder,
    ParsedRequest,
    Success,
    VerifierTransport,
)
from .strategy.browserid import VerifyCallback

SERVICE_NAME = "browserid"
SERVICE_PORT = 8010


def email_as_user(email: str, done) -> None:
    """Resolution callback treating every verified email as its own user."""
    done(None, {"email": email})


class BrowserIDService(BaseService):
    """BrowserID login service implementation."""

    def __init__(
        self,
        config: Optional[ServiceConfig] = None,
        verify: Optional[VerifyCallback] = None,
        transport: Optional[VerifierTransport] = None,
    ):
        super().__init__(SERVICE_NAME, SERVICE_PORT, config=config)
        self.strategy = BrowserIDStrategy(
            self.config.strategy_settings(),
            verify or email_as_user,
            transport=transport,
            metrics=self.metrics
        )
        self._setup_login_routes()

    def _setup_login_routes(self):
        """Set up BrowserID-specific routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": SERVICE_NAME,
                "message": "BrowserID login service",
                "audience": self.strategy.options.audience,
                "version": "1.0.0"
            }

        @self.app.post("/auth/browserid")
        async def login(request: Request):
            """Verify the posted assertion and resolve the user."""
            body = await self._read_body(request)
            recorder = OutcomeRecorder()

            await self.strategy.authenticate(
                ParsedRequest(body=body, request=request),
                recorder
            )
            return self._to_response(recorder.outcome)

    async def _read_body(self, request: Request) -> Dict[str, Any]:
        """Parse a JSON object or form body; anything else counts as empty."""
        content_type = request.headers.get("content-type", "")
        try:
            if content_type.startswith("application/json"):
                payload = await request.json()
                return payload if isinstance(payload, dict) else {}
            form = await request.form()
            return dict(form)
        except ValueError as e:
            self.logger.warning("Unreadable request body", content_type=content_type, error=str(e))
            return {}

    def _to_response(self, outcome) -> JSONResponse:
        if isinstance(outcome, Success):
            return JSONResponse(
                status_code=200,
                content={"authenticated": True, "user": outcome.user, "info": outcome.info}
            )

        if isinstance(outcome, Fail):
            if isinstance(outcome.info, BrowserIDException):
                return self._error_response(outcome.info)
            return JSONResponse(
                status_code=401,
                content=ErrorResponse(
                    request_id=get_request_id(),
                    code="AUTHENTICATION_FAILED",
                    message=_describe(outcome.info) or "Authentication failed",
                ).model_dump()
            )

        if isinstance(outcome, Error):
            if isinstance(outcome.cause, BrowserIDException):
                return self._error_response(outcome.cause)
            self.logger.error("Authentication error", error=str(outcome.cause))
            return JSONResponse(
                status_code=500,
                content=ErrorResponse(
                    request_id=get_request_id(),
                    code="INTERNAL_ERROR",
                    message="Internal server error",
                ).model_dump()
            )

        raise RuntimeError("BrowserID strategy reported no outcome")

    def _error_response(self, exc: BrowserIDException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.to_response(get_request_id()).model_dump()
        )

    async def _check_dependencies(self) -> Dict[str, str]:
        """Report configuration the service needs; the verifier is not contacted."""
        return {"verifier": self.strategy.options.verifier_url}


def _describe(info: Any) -> Optional[str]:
    if isinstance(info, str):
        return info
    if isinstance(info, Mapping):
        message = info.get("message")
        return str(message) if message else None
    return None


def create_app(
    config: Optional[ServiceConfig] = None,
    verify: Optional[VerifyCallback] = None,
    transport: Optional[VerifierTransport] = None,
):
    """Create FastAPI application."""
    service = BrowserIDService(config=config, verify=verify, transport=transport)
    return service.app


if __name__ == "__main__":
    service = BrowserIDService(config=get_config(SERVICE_NAME, SERVICE_PORT))
    service.run()
