"""
Shared configuration management for the BrowserID access service.
"""

from typing import Any, Dict, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="BROWSERID_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )
    
    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")
    
    # Strategy
    audience: Optional[str] = Field(default=None)
    assertion_field: str = Field(default="assertion")
    pass_request_to_callback: bool = Field(default=False)
    strict_audience: bool = Field(default=True)
    rejection_as_failure: bool = Field(default=False)
    
    # Remote verifier
    verifier_url: str = Field(default="https://verifier.login.persona.org/verify")
    verifier_timeout: float = Field(default=5.0)
    
    def strategy_settings(self) -> Dict[str, Any]:
        """Options mapping understood by the BrowserID strategy."""
        return {
            "audience": self.audience,
            "assertion_field": self.assertion_field,
            "pass_request_to_callback": self.pass_request_to_callback,
            "strict_audience": self.strict_audience,
            "rejection_as_failure": self.rejection_as_failure,
            "verifier_url": self.verifier_url,
            "timeout": self.verifier_timeout,
        }


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""
    
    service_name: str
    port: int
    host: str = "0.0.0.0"
    
    def __init__(self, service_name: str, port: int, **kwargs):
        super().__init__(service_name=service_name, port=port, **kwargs)


def get_config(service_name: str, port: int, **overrides) -> ServiceConfig:
    """Get configuration for a specific service."""
    return ServiceConfig(service_name=service_name, port=port, **overrides)
