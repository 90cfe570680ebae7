# /concierge/utils/alerting.py

import httpx
import logging
from typing import Optional, Dict, Any
from datetime import datetime, timezone

from concierge.config.settings import settings
from concierge.utils.metrics import webhook_deliveries_counter

# Operator alerts for failures a user cannot fix by retrying, such as the LLM
# provider rejecting our credentials. Callers schedule these with
# fire_and_forget; a failed delivery is logged and counted only.

logger = logging.getLogger(__name__)


class AlertingService:
    def __init__(self, webhook_url: Optional[str]):
        self.webhook_url = webhook_url
        self.client = httpx.AsyncClient(timeout=5.0) if webhook_url else None

    async def send_critical_alert(self, error: str, context: Dict[str, Any]):
        if not self.client:
            logger.warning(f"Critical alert not delivered (no ALERTING_WEBHOOK_URL): {error}")
            webhook_deliveries_counter.labels(kind="critical_alert", status="skipped").inc()
            return
        alert = {
            "severity": "critical",
            "service": "move-concierge",
            "error": error,
            "context": context,
            "environment": settings.environment,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        try:
            response = await self.client.post(self.webhook_url, json=alert)
            response.raise_for_status()
            webhook_deliveries_counter.labels(kind="critical_alert", status="success").inc()
        except httpx.HTTPError as e:
            webhook_deliveries_counter.labels(kind="critical_alert", status="error").inc()
            logger.error(f"Failed to send critical alert '{error}': {e}")

    async def cleanup(self):
        if self.client:
            await self.client.aclose()


# Globally accessible instance
alerting_service = AlertingService(settings.alerting_webhook_url)
