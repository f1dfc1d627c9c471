"""
BrowserID authentication strategy.

The strategy authenticates requests by using a remote verifier as a trusted
secondary authority for email assertions. Applications supply a ``verify``
callback which accepts a verified ``email`` and then calls
``done(err, user, info)``; ``user`` should be falsy when the email does not
map onto an account, and ``err`` set when the lookup itself failed.

Example::

    async def find_user(email, done):
        user = await users.find_by_email(email)
        done(None, user)

    strategy = BrowserIDStrategy({"audience": "https://www.example.com"}, find_user)
    await strategy.authenticate(ParsedRequest(body=form), actions)
"""

import asyncio
import inspect
import time
from typing import Any, Callable, Mapping, Optional, Union

from pydantic import ValidationError

from shared.errors import (
    AudienceMismatchError,
    BadRequestError,
    ConfigurationError,
    MalformedResponseError,
    TransportError,
    VerificationError,
)
from shared.logging import get_logger
from shared.metrics import MetricsCollector, get_metrics_collector

from .interfaces import AuthenticationActions, VerifierTransport
from .options import StrategyOptions
from .verifier import (
    HttpxVerifierTransport,
    VerificationRequest,
    VerificationResponse,
    audience_matches,
    host_of,
)

VerifyCallback = Callable[..., Any]


class BrowserIDStrategy:
    """Authenticate requests carrying a BrowserID assertion."""

    name = "browserid"

    def __init__(
        self,
        options: Union[StrategyOptions, Mapping[str, Any]],
        verify: Optional[VerifyCallback],
        transport: Optional[VerifierTransport] = None,
        metrics: Optional[MetricsCollector] = None,
    ):
        if not isinstance(options, StrategyOptions):
            options = options or {}
            if not options.get("audience"):
                raise ConfigurationError("BrowserID authentication requires an audience option")
            try:
                options = StrategyOptions(**options)
            except ValidationError as e:
                raise ConfigurationError(
                    "Invalid BrowserID strategy options",
                    details={"errors": e.errors(include_url=False, include_context=False, include_input=False)}
                ) from e
        if verify is None or not callable(verify):
            raise ConfigurationError("BrowserID authentication strategy requires a verify function")

        self._options = options
        self._verify = verify
        self._transport = transport or HttpxVerifierTransport(timeout=options.timeout)
        self._verifier_host = host_of(options.verifier_url)
        self.metrics = metrics or get_metrics_collector(self.name)
        self.logger = get_logger("browserid.strategy")

    @property
    def options(self) -> StrategyOptions:
        return self._options

    async def authenticate(self, request: Any, actions: AuthenticationActions) -> None:
        """Authenticate ``request``, reporting exactly one outcome to ``actions``."""
        options = self._options

        body = getattr(request, "body", None)
        assertion = body.get(options.assertion_field) if isinstance(body, Mapping) else None
        if not assertion:
            self.logger.info("Assertion missing from request", field=options.assertion_field)
            self.metrics.record_verification("fail", "missing_assertion")
            actions.fail(BadRequestError("Missing assertion"))
            return

        try:
            result = await self._verify_assertion(str(assertion), options)
        except (TransportError, MalformedResponseError, AudienceMismatchError) as e:
            self.metrics.record_verification("error", e.code.lower())
            actions.error(e)
            return
        except VerificationError as e:
            self.logger.warning("Verifier rejected assertion", reason=e.message)
            self.metrics.record_verification(
                "fail" if options.rejection_as_failure else "error", "rejected"
            )
            if options.rejection_as_failure:
                actions.fail(e)
            else:
                actions.error(e)
            return
        except Exception as e:
            self.logger.error("Unexpected verifier transport failure", error=str(e), exc_info=True)
            self.metrics.record_verification("error", "transport")
            actions.error(e)
            return

        await self._resolve_user(request, result.email, options, actions)

    async def _verify_assertion(self, assertion: str, options: StrategyOptions) -> VerificationResponse:
        verification = VerificationRequest(assertion=assertion, audience=options.audience)

        try:
            with self.metrics.time_verification():
                raw = await asyncio.wait_for(
                    self._transport.send(
                        options.verifier_url,
                        verification.encode(),
                        verification.headers(self._verifier_host)
                    ),
                    timeout=options.timeout
                )
        except asyncio.TimeoutError as e:
            self.logger.error("Verifier did not answer in time", timeout=options.timeout)
            raise TransportError(
                "Verifier request timed out",
                details={"url": options.verifier_url, "timeout": options.timeout}
            ) from e

        try:
            result = VerificationResponse.model_validate_json(raw)
        except ValidationError as e:
            self.logger.error("Verifier response could not be parsed", error=str(e))
            raise MalformedResponseError(
                "Malformed verifier response",
                details={"errors": e.errors(include_url=False, include_context=False, include_input=False)}
            ) from e

        if not result.okay:
            raise VerificationError(result.reason, details={"status": result.status})

        if (options.strict_audience and result.audience is not None
                and not audience_matches(options.audience, result.audience)):
            self.logger.warning(
                "Verifier audience does not match",
                expected=options.audience,
                actual=result.audience
            )
            raise AudienceMismatchError(options.audience, result.audience)

        return result

    async def _resolve_user(
        self,
        request: Any,
        email: str,
        options: StrategyOptions,
        actions: AuthenticationActions,
    ) -> None:
        loop = asyncio.get_running_loop()
        resolved: asyncio.Future = loop.create_future()

        def settle(result: tuple) -> None:
            # Runs on the loop thread only; the first completion wins
            if resolved.done():
                self.logger.warning("verify callback completed more than once", email=email)
                return
            resolved.set_result(result)

        def done(err: Any = None, user: Any = None, info: Any = None) -> None:
            try:
                on_loop = asyncio.get_running_loop() is loop
            except RuntimeError:
                on_loop = False
            if on_loop:
                settle((err, user, info))
            else:
                loop.call_soon_threadsafe(settle, (err, user, info))

        args = (request, email, done) if options.pass_request_to_callback else (email, done)

        started = time.time()
        try:
            pending = self._verify(*args)
            if inspect.isawaitable(pending):
                await pending
        except Exception as e:
            if not resolved.done():
                self.logger.error("verify callback raised", email=email, error=str(e))
                self.metrics.record_verification("error", "application")
                actions.error(e)
                return
            self.logger.warning("verify callback raised after completing", email=email, error=str(e))

        err, user, info = await resolved

        if err:
            self.logger.error("User resolution failed", email=email, error=str(err))
            self.metrics.record_verification("error", "application")
            actions.error(err)
            return
        if not user:
            self.logger.info("No user for verified email", email=email)
            self.metrics.record_verification("fail", "no_user")
            actions.fail(info)
            return

        self.logger.info(
            "BrowserID authentication succeeded",
            email=email,
            resolve_ms=round((time.time() - started) * 1000, 2)
        )
        self.metrics.record_verification("success", "okay")
        actions.success(user, info)
