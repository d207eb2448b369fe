from typing import List

from pydantic import BaseModel, Field


class ProxyConfig(BaseModel):
    """Reverse-proxy trust policy for client-address resolution."""

    trusted_proxies: List[str] = Field(
        default_factory=list,
        description="Trusted proxy addresses or CIDR ranges; empty trusts every peer",
    )
    trusted_proxy_header: str = Field(
        default="",
        description="Single-address header that overrides forwarding chains (e.g. Client-IP)",
    )
    forwarded_header: str = Field(
        default="X-Forwarded-For",
        description="Header carrying the comma-separated forwarding chain",
    )
    trust_forwarded_header: bool = Field(
        default=False,
        description="Whether the web adapter consults proxy headers at all",
    )


class LoggingConfig(BaseModel):
    """Root logger configuration."""

    level: str = Field(default="INFO", description="Root log level")
    json_output: bool = Field(
        default=True, description="Emit JSON lines instead of coloured dev output"
    )
