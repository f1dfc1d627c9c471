"""
Construction-time options for the BrowserID strategy.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .verifier import VERIFIER_URL


class StrategyOptions(BaseModel):
    """Immutable per-strategy settings."""
    
    model_config = ConfigDict(frozen=True, extra="forbid")
    
    # Origin this deployment serves; assertions are scoped to it
    audience: str
    assertion_field: str = "assertion"
    pass_request_to_callback: bool = False
    strict_audience: bool = True
    rejection_as_failure: bool = False
    verifier_url: str = VERIFIER_URL
    timeout: float = Field(default=5.0, gt=0)
    
    @field_validator("audience", "assertion_field", "verifier_url")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("must not be empty")
        return value
