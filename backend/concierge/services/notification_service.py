# /concierge/services/notification_service.py

import httpx
import logging
from typing import Optional, Dict, Any, List, Union
from datetime import datetime, timezone

from concierge.config.settings import settings
from concierge.utils.metrics import webhook_deliveries_counter
from concierge.utils.tasks import fire_and_forget

# Outbound "a vendor workflow was submitted" webhook for the vendor-matching
# backend. Delivery is best-effort: it runs in the background and a failure
# is logged, never surfaced to the user who submitted.

logger = logging.getLogger(__name__)


class NotificationService:
    def __init__(self, webhook_url: Optional[str]):
        self.webhook_url = webhook_url
        self.client = httpx.AsyncClient(timeout=10.0) if webhook_url else None

    async def send_workflow_submitted(self, user_id: str, workflow_id: str,
                                      answers: Union[Dict[str, Any], List[Any]], submission_id: str):
        if not self.client:
            logger.warning(f"Notification webhook not configured; skipping vendor_workflow_submitted for {workflow_id}")
            webhook_deliveries_counter.labels(kind="vendor_workflow_submitted", status="skipped").inc()
            return
        payload = {
            "type": "vendor_workflow_submitted",
            "userId": user_id,
            "workflowId": workflow_id,
            "answers": answers,
            "submissionId": submission_id,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        try:
            response = await self.client.post(self.webhook_url, json=payload)
            response.raise_for_status()
            webhook_deliveries_counter.labels(kind="vendor_workflow_submitted", status="success").inc()
        except Exception as e:
            webhook_deliveries_counter.labels(kind="vendor_workflow_submitted", status="error").inc()
            logger.warning(f"Webhook notification failed for {workflow_id} (user {user_id}): {e}")

    def notify_workflow_submitted(self, user_id: str, workflow_id: str,
                                  answers: Union[Dict[str, Any], List[Any]], submission_id: str):
        """Schedules the webhook without waiting for it."""
        fire_and_forget(
            self.send_workflow_submitted(user_id, workflow_id, answers, submission_id),
            name=f"notify_{workflow_id}_{user_id}",
        )

    async def cleanup(self):
        if self.client:
            await self.client.aclose()


# Globally accessible instance
notification_service = NotificationService(settings.notification_webhook_url)
