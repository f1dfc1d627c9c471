"""
BrowserID service package.

This package exposes the FastAPI application that authenticates users by
email assertion, verified against a remote BrowserID verifier:

- app.main: Application entrypoint that wires routes and lifecycle.
- app.strategy: The authentication strategy and its verifier transport.

Design notes:
- Module import must not perform network calls. All IO happens in route
  handlers or inside the strategy's transport.
- Use the shared/ utilities for logging, metrics, config and errors.
- The strategy is stateless across requests apart from its options.
"""
