"""HTTP client for the workflow automation platform's execution event log.

Events are listed with ``GET /integrations/{integration_id}/events`` using
``limit``/``offset`` pagination. The response body is either a JSON list or
an object with a ``data`` list. Paging stops at the first short page or once
``max_events`` payloads have been collected.
"""

from typing import Any

import httpx

from business_overview.core.event_normalizer import parse_execution_events
from business_overview.core.models import ExecutionEvent
from business_overview.errors import CollaboratorUnavailableError
from business_overview.observability import get_logger
from business_overview.settings import Settings

logger = get_logger(__name__)


class WorkflowEventClient:
    """Async HTTP client for workflow execution events.

    Implements IWorkflowEventSource from core/interfaces.py. Invalid event
    payloads are skipped during normalization, never raised.

    Args:
        settings: Service settings with the platform URL, paging limits and timeout.
        transport: Optional httpx transport, used to stub the platform in tests.
    """

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._base_url = settings.workflow_base_url.rstrip("/")
        self._timeout = settings.collaborator_timeout_seconds
        self._enabled = settings.workflow_enabled
        self._page_size = settings.event_page_size
        self._max_events = settings.max_events
        self._transport = transport

    async def fetch_event_payloads(self, integration_id: str) -> list[dict[str, Any]]:
        """Collect raw event payloads page by page.

        Raises:
            CollaboratorUnavailableError: If the workflow integration is disabled.
            httpx.HTTPError: On HTTP or connection errors.
        """
        if not self._enabled:
            raise CollaboratorUnavailableError(
                "workflow", "integration is disabled (BUSINESS_OVERVIEW_WORKFLOW_ENABLED=false)"
            )

        url = f"{self._base_url}/integrations/{integration_id}/events"
        payloads: list[dict[str, Any]] = []
        offset = 0

        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            while len(payloads) < self._max_events:
                limit = min(self._page_size, self._max_events - len(payloads))
                try:
                    response = await client.get(url, params={"limit": limit, "offset": offset})
                    response.raise_for_status()
                except httpx.HTTPStatusError as exc:
                    logger.error(
                        "workflow_http_error",
                        url=url,
                        status_code=exc.response.status_code,
                        response_text=exc.response.text[:500],
                    )
                    raise
                except httpx.RequestError as exc:
                    logger.error("workflow_connection_error", url=url, error=str(exc))
                    raise

                body = response.json()
                page: list[dict[str, Any]] = body if isinstance(body, list) else body.get("data") or []
                payloads.extend(page)
                if len(page) < limit:
                    break
                offset += len(page)

        logger.debug("workflow_events_fetched", integration_id=integration_id, count=len(payloads))
        return payloads

    async def list_events(self, integration_id: str) -> list[ExecutionEvent]:
        """Fetch and normalize every execution event for the integration."""
        return parse_execution_events(await self.fetch_event_payloads(integration_id))
