"""
Mock BrowserID verifier for local development and tests.

Assertions of the form ``valid:<email>`` verify for ``<email>``;
``expired:<email>`` reports an expired assertion and anything else an
invalid signature. The audience posted is echoed back.
"""

import time
from typing import Any, Dict

from fastapi import FastAPI, Form

from shared.logging import get_logger


class MockVerifierServer:
    """Mock verifier implementation."""

    def __init__(self, port: int = 8090, issuer: str = "mock.verifier.local"):
        self.port = port
        self.issuer = issuer
        self.logger = get_logger("mock.verifier")
        self.app = FastAPI(title="Mock BrowserID Verifier", version="1.0.0")
        self.requests = 0

        self._setup_routes()

    def _setup_routes(self):
        """Set up mock verifier routes."""

        @self.app.post("/verify")
        async def verify(assertion: str = Form(""), audience: str = Form("")) -> Dict[str, Any]:
            """Verify an assertion the way the hosted verifier answers."""
            self.requests += 1

            if not assertion or not audience:
                return {"status": "failure", "reason": "need assertion and audience"}

            kind, _, email = assertion.partition(":")
            if kind == "valid" and email:
                self.logger.info("Mock assertion verified", email=email, audience=audience)
                return {
                    "status": "okay",
                    "email": email,
                    "audience": audience,
                    "expires": int((time.time() + 300) * 1000),
                    "issuer": self.issuer
                }
            if kind == "expired":
                return {"status": "failure", "reason": "assertion has expired"}
            return {"status": "failure", "reason": "invalid signature"}

    def run(self):
        """Run the mock verifier."""
        import uvicorn
        uvicorn.run(self.app, host="0.0.0.0", port=self.port)


if __name__ == "__main__":
    MockVerifierServer().run()
