"""
Fixtures shared by the BrowserID service tests.
"""

import asyncio
import json
from typing import Any, Dict, List, Mapping, Optional

import pytest
from prometheus_client import CollectorRegistry

from shared.metrics import MetricsCollector


class FakeTransport:
    """VerifierTransport double returning a canned body."""
    
    def __init__(self, response: Any = None, exc: Optional[BaseException] = None, delay: float = 0):
        if isinstance(response, (dict, list)):
            response = json.dumps(response)
        if isinstance(response, str):
            response = response.encode("utf-8")
        self.response = response
        self.exc = exc
        self.delay = delay
        self.calls: List[Dict[str, Any]] = []
    
    async def send(self, url: str, content: bytes, headers: Mapping[str, str]) -> bytes:
        self.calls.append({"url": url, "content": content, "headers": dict(headers)})
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.exc is not None:
            raise self.exc
        return self.response


@pytest.fixture
def metrics():
    """Metrics collector bound to a private registry."""
    return MetricsCollector("browserid_test", registry=CollectorRegistry())


@pytest.fixture
def okay_response():
    """Verifier answer for a valid assertion."""
    return {
        "status": "okay",
        "email": "user@example.com",
        "audience": "http://example.com",
        "expires": 1354217396705,
        "issuer": "login.persona.org"
    }


@pytest.fixture
def make_transport():
    return FakeTransport
