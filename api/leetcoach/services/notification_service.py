"""
Notification transports: email through the Resend HTTP API and web push.

Both senders report success as a boolean and never raise for delivery
problems; failures are logged and left to the caller to record.
"""
import json
import logging
from typing import Any, Dict, Optional

import requests
from pywebpush import webpush, WebPushException

from leetcoach.core.config import settings

logger = logging.getLogger(__name__)


class EmailSender:
    """Sends HTML email through Resend."""

    base_url = "https://api.resend.com/emails"

    def __init__(
        self,
        api_key: Optional[str] = None,
        from_email: Optional[str] = None,
        timeout: Optional[int] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.resend_api_key
        self.from_email = from_email if from_email is not None else settings.from_email
        self.timeout = timeout if timeout is not None else settings.email_timeout_seconds

        if not self.api_key:
            logger.warning("Resend API key not configured. Digest emails will not be sent.")

    def send(self, to: str, subject: str, html: str) -> bool:
        """
        Send one email.

        Returns:
            True if Resend accepted the message, False otherwise
        """
        if not self.api_key or not self.from_email:
            logger.warning(f"Skipping email to {to}: email sender is not configured")
            return False

        try:
            response = requests.post(
                self.base_url,
                headers={"Authorization": f"Bearer {self.api_key}"},
                json={
                    "from": self.from_email,
                    "to": to,
                    "subject": subject,
                    "html": html,
                },
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            logger.error(f"Email to {to} failed: {str(e)}")
            return False

        logger.info(f"Email sent to {to}: {subject}")
        return True


class PushSender:
    """Sends web push notifications signed with the VAPID key."""

    def __init__(
        self,
        vapid_private_key: Optional[str] = None,
        vapid_subject: Optional[str] = None,
        timeout: Optional[int] = None,
    ):
        self.vapid_private_key = (
            vapid_private_key if vapid_private_key is not None else settings.vapid_private_key
        )
        self.vapid_subject = vapid_subject if vapid_subject is not None else settings.vapid_subject
        self.timeout = timeout if timeout is not None else settings.push_timeout_seconds

    def send(self, subscription_info: Dict[str, Any], payload: Dict[str, Any]) -> bool:
        """
        Send one push message to one subscription.

        Args:
            subscription_info: {"endpoint": ..., "keys": {"p256dh": ..., "auth": ...}}
            payload: JSON-serializable message, e.g. {"title": ..., "body": ...}

        Returns:
            True if the push service accepted the message, False otherwise
        """
        endpoint = subscription_info.get("endpoint", "")
        if not self.vapid_private_key:
            logger.warning(f"Skipping push to {endpoint[:40]}...: VAPID key not configured")
            return False

        try:
            webpush(
                subscription_info=subscription_info,
                data=json.dumps(payload),
                vapid_private_key=self.vapid_private_key,
                vapid_claims={"sub": self.vapid_subject},
                timeout=self.timeout,
            )
        except WebPushException as e:
            status_code = e.response.status_code if e.response is not None else None
            logger.error(f"Push to {endpoint[:40]}... failed (status {status_code}): {str(e)}")
            return False
        except requests.exceptions.RequestException as e:
            logger.error(f"Push to {endpoint[:40]}... failed: {str(e)}")
            return False

        return True
