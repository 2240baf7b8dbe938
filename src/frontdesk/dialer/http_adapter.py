"""
HTTP dialer adapter.

Posts call requests to a dialer bridge and waits for the bridge to report
completion on the /webhooks/dialer/calls/{call_id}/completed endpoint. Every
placed call gets a fresh call_id, so a late report for an abandoned call
never resolves a later call to the same prospect.
"""

from __future__ import annotations

from uuid import uuid4

import httpx

from frontdesk.dialer.completions import CompletionRegistry
from frontdesk.dialer.config import DialerConfig, get_dialer_config
from frontdesk.dialer.interface import (
    CallCompletion,
    CallInitiationError,
    CallSink,
)
from frontdesk.prospects.models import ScoredProspect
from frontdesk.shared.logging import get_logger

logger = get_logger(__name__)


class HttpCallSink(CallSink):
    """Call sink backed by a dialer bridge reachable over HTTP."""

    def __init__(
        self,
        config: DialerConfig | None = None,
        completions: CompletionRegistry | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config or get_dialer_config()
        self._completions = completions or CompletionRegistry()
        self._http_client = http_client
        self._owns_client = http_client is None

    @property
    def completions(self) -> CompletionRegistry:
        return self._completions

    def _get_client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._config.request_timeout_seconds)
            )
        return self._http_client

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._config.api_key:
            headers["Authorization"] = f"Bearer {self._config.api_key}"
        return headers

    async def close(self) -> None:
        self._completions.clear()
        if self._owns_client and self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    async def initiate(self, prospect: ScoredProspect) -> str:
        """Ask the bridge to dial the prospect and return the new call id."""
        client = self._get_client()
        call_id = uuid4().hex
        payload = {
            "call_id": call_id,
            "prospect_id": prospect.key,
            "phone": prospect.phone,
            "status": prospect.status,
            "score": prospect.score,
            "callback_url": self._config.get_completion_url(call_id),
        }

        logger.info(
            "Initiating dialer call",
            extra={"prospect_id": prospect.key, "call_id": call_id, "score": prospect.score},
        )

        self._completions.expect(call_id)
        try:
            response = await client.post(
                self._config.get_initiate_url(),
                json=payload,
                headers=self._headers(),
            )
        except httpx.HTTPError as e:
            self._completions.discard(call_id)
            logger.exception(
                "HTTP error during call initiation",
                extra={"prospect_id": prospect.key},
            )
            raise CallInitiationError(
                f"HTTP error: {e!s}",
                error_code="HTTP_ERROR",
            ) from e

        if response.status_code >= 400:
            self._completions.discard(call_id)
            try:
                error_data = response.json() if response.content else {}
            except ValueError:
                error_data = {"body": response.text}
            if not isinstance(error_data, dict):
                error_data = {"body": error_data}
            logger.error(
                "Dialer call initiation failed",
                extra={
                    "status_code": response.status_code,
                    "error": error_data,
                    "prospect_id": prospect.key,
                },
            )
            raise CallInitiationError(
                error_data.get("message", "Call initiation failed"),
                error_code=str(error_data.get("code", response.status_code)),
                response=error_data,
            )

    async def await_completion(self, call_id: str) -> CallCompletion:
        return await self._completions.wait(call_id)

    async def cancel(self, call_id: str) -> None:
        self._completions.discard(call_id)
