"""
BrowserID authentication strategy package.

Authenticates a request by posting its email assertion to a remote
verifier and reporting exactly one of success, fail or error to the host
framework.

- strategy.browserid: the strategy and its per-attempt control flow.
- strategy.options: immutable construction-time options.
- strategy.verifier: wire models and the outbound HTTP transport.
- strategy.interfaces: what the host framework must provide.
- strategy.outcome: outcome values and a recorder for them.
"""

from .browserid import BrowserIDStrategy
from .interfaces import AuthenticationActions, ParsedRequest, VerifierTransport
from .options import StrategyOptions
from .outcome import Error, Fail, OutcomeRecorder, Success
from .verifier import (
    HttpxVerifierTransport,
    VERIFIER_HOST,
    VERIFIER_URL,
    VerificationRequest,
    VerificationResponse,
)

__all__ = [
    "AuthenticationActions",
    "BrowserIDStrategy",
    "Error",
    "Fail",
    "HttpxVerifierTransport",
    "OutcomeRecorder",
    "ParsedRequest",
    "StrategyOptions",
    "Success",
    "VERIFIER_HOST",
    "VERIFIER_URL",
    "VerificationRequest",
    "VerificationResponse",
    "VerifierTransport",
]
