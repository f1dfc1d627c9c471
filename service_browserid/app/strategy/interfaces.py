"""
Capabilities the strategy depends on.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Protocol, runtime_checkable


@runtime_checkable
class AuthenticationActions(Protocol):
    """Outcome callbacks exposed by the host framework for one attempt."""
    
    def success(self, user: Any, info: Any = None) -> None: ...
    
    def fail(self, info: Any = None) -> None: ...
    
    def error(self, err: BaseException) -> None: ...


@runtime_checkable
class VerifierTransport(Protocol):
    """Outbound HTTP capability used to reach the remote verifier."""
    
    async def send(self, url: str, content: bytes, headers: Mapping[str, str]) -> bytes:
        """POST ``content`` to ``url`` and return the full response body."""
        ...


@dataclass
class ParsedRequest:
    """An inbound request whose body was already parsed upstream."""
    
    body: Optional[Mapping[str, Any]] = None
    request: Any = None
