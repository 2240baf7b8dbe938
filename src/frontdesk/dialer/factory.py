"""
Dialer factory.
"""

from __future__ import annotations

from frontdesk.dialer.completions import CompletionRegistry
from frontdesk.dialer.config import DialerConfig, ProviderType
from frontdesk.dialer.http_adapter import HttpCallSink
from frontdesk.dialer.interface import CallSink
from frontdesk.dialer.mock_adapter import MockCallSink
from frontdesk.shared.logging import get_logger

logger = get_logger(__name__)


def _mask(s: str, keep: int = 4) -> str:
    if not s:
        return ""
    if len(s) <= keep:
        return "*" * len(s)
    return f"{s[:keep]}***"


def create_call_sink(config: DialerConfig, completions: CompletionRegistry) -> CallSink:
    """Build the call sink selected by the dialer config."""
    logger.info(
        "Dialer config resolved",
        extra={
            "provider_type": config.provider_type.value,
            "base_url": config.base_url,
            "api_key": _mask(config.api_key),
            "public_base_url": config.public_base_url,
        },
    )

    if config.provider_type == ProviderType.HTTP:
        return HttpCallSink(config=config, completions=completions)

    if config.provider_type == ProviderType.MOCK:
        return MockCallSink()

    raise ValueError(f"Unsupported dialer provider_type: {config.provider_type}")
