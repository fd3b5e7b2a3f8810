"""
SES email delivery channel.

Sends processing notifications by email through Amazon SES. boto3 is
synchronous, so sends run in a worker thread.

Dependencies: boto3
System role: Email delivery channel for the processing notifier
"""

import asyncio
import logging

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from edu_rag.core.notifications.channels import EMAIL_CHANNEL
from edu_rag.models.notification import ProcessingNotification

logger = logging.getLogger(__name__)


class SesEmailChannel:
    """Email delivery channel using Amazon SES."""

    name = EMAIL_CHANNEL

    def __init__(
        self,
        sender: str,
        recipient: str,
        region: str = "ap-southeast-2",
        client=None,
    ) -> None:
        """
        Initialize SES channel.

        Args:
            sender: Verified SES sender address
            recipient: Address receiving notifications
            region: AWS region for SES
            client: Optional pre-built boto3 SES client
        """
        self._sender = sender
        self._recipient = recipient
        self._ses_client = client or boto3.client("ses", region_name=region)

    def _send(self, notification: ProcessingNotification) -> bool:
        body = notification.message
        if notification.action_url:
            body = f"{body}\n\n{notification.action_url}"
        try:
            response = self._ses_client.send_email(
                Source=self._sender,
                Destination={"ToAddresses": [self._recipient]},
                Message={
                    "Subject": {"Data": notification.title, "Charset": "UTF-8"},
                    "Body": {"Text": {"Data": body, "Charset": "UTF-8"}},
                },
            )
        except (ClientError, BotoCoreError) as e:
            logger.warning(
                f"{__name__}:_send - SES send failed",
                extra={"notification_id": notification.id, "error": str(e)},
            )
            return False

        logger.info(
            f"{__name__}:_send - Email sent",
            extra={"notification_id": notification.id, "message_id": response.get("MessageId")},
        )
        return True

    async def deliver(self, notification: ProcessingNotification) -> bool:
        return await asyncio.to_thread(self._send, notification)
