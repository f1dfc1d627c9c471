"""
Remote verifier wire protocol and HTTP transport.

The verifier takes a form-encoded ``assertion`` and ``audience`` and answers
with a JSON object whose ``status`` is ``"okay"`` (with the verified
``email``) or anything else (with a ``reason``).
"""

from typing import Any, Dict, Mapping, Optional
from urllib.parse import quote, urlencode, urlsplit

import httpx
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from shared.errors import TransportError
from shared.logging import get_logger

VERIFIER_HOST = "verifier.login.persona.org"
VERIFIER_PATH = "/verify"
VERIFIER_URL = f"https://{VERIFIER_HOST}{VERIFIER_PATH}"

STATUS_OKAY = "okay"

_DEFAULT_PORTS = {"http": 80, "https": 443}


class VerificationRequest(BaseModel):
    """One outbound verification call."""
    
    assertion: str
    audience: str
    
    def encode(self) -> bytes:
        """Form-encode the request body, keys in wire order."""
        query = urlencode(
            [("assertion", self.assertion), ("audience", self.audience)],
            quote_via=quote,
            safe=""
        )
        return query.encode("utf-8")
    
    def headers(self, host: str = VERIFIER_HOST) -> Dict[str, str]:
        return {
            "Host": host,
            "Content-Type": "application/x-www-form-urlencoded",
            "Content-Length": str(len(self.encode())),
        }


class VerificationResponse(BaseModel):
    """Verifier answer; unknown fields are kept."""
    
    model_config = ConfigDict(extra="allow")
    
    status: Optional[str] = None
    email: Optional[str] = None
    reason: Optional[str] = None
    audience: Optional[str] = None
    expires: Optional[int] = None
    issuer: Optional[str] = None
    
    @field_validator("status", "reason", mode="before")
    @classmethod
    def _as_text(cls, value: Any) -> Optional[str]:
        if value is None or isinstance(value, str):
            return value
        return str(value)
    
    @model_validator(mode="after")
    def _okay_carries_email(self) -> "VerificationResponse":
        if self.status == STATUS_OKAY and not self.email:
            raise ValueError("okay response without email")
        return self
    
    @property
    def okay(self) -> bool:
        return self.status == STATUS_OKAY


def normalize_origin(origin: str) -> str:
    """Canonical ``scheme://host[:port]`` form, default ports dropped."""
    parts = urlsplit(origin.strip())
    if not parts.scheme or not parts.hostname:
        return origin.strip().rstrip("/").lower()
    scheme = parts.scheme.lower()
    host = parts.hostname.lower()
    try:
        port = parts.port
    except ValueError:
        return origin.strip().rstrip("/").lower()
    if port is None or _DEFAULT_PORTS.get(scheme) == port:
        return f"{scheme}://{host}"
    return f"{scheme}://{host}:{port}"


def audience_matches(expected: str, actual: Optional[str]) -> bool:
    if not actual:
        return False
    return normalize_origin(expected) == normalize_origin(actual)


def host_of(url: str) -> str:
    """Value for the ``Host`` header when posting to ``url``."""
    return urlsplit(url).netloc or VERIFIER_HOST


class HttpxVerifierTransport:
    """Default transport posting to the verifier over httpx.
    
    A shared ``httpx.AsyncClient`` may be injected and is reused across
    concurrent attempts; without one a client is opened per call.
    """
    
    def __init__(self, client: Optional[httpx.AsyncClient] = None, timeout: float = 5.0):
        self._client = client
        self.timeout = timeout
        self.logger = get_logger("browserid.transport")
    
    async def send(self, url: str, content: bytes, headers: Mapping[str, str]) -> bytes:
        try:
            if self._client is not None:
                response = await self._client.post(url, content=content, headers=dict(headers))
            else:
                async with httpx.AsyncClient(timeout=self.timeout, verify=True) as client:
                    response = await client.post(url, content=content, headers=dict(headers))
        except httpx.TimeoutException as e:
            self.logger.error("Verifier request timed out", url=url, error=str(e))
            raise TransportError(
                "Verifier request timed out",
                details={"url": url, "timeout": self.timeout}
            ) from e
        except httpx.HTTPError as e:
            self.logger.error("Verifier HTTP error", url=url, error=str(e))
            raise TransportError(
                "Verifier unavailable",
                details={"url": url, "http_error": str(e)}
            ) from e
        
        if response.status_code != 200:
            # The body still decides the outcome; the status is informational
            self.logger.warning(
                "Verifier returned non-200 status",
                url=url,
                status_code=response.status_code
            )
        return response.content
    
    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
