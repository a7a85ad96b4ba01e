"""
Amazon SQS client wrapper for receiving change notifications.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import boto3

from carthooks.core.config import WatcherSettings


class SQSClient:
    """Long-poll and acknowledge messages on the watch queue."""

    def __init__(
        self, settings: WatcherSettings, queue_url: Optional[str] = None, client: Any = None
    ) -> None:
        self._settings = settings
        self._queue_url = queue_url or settings.sqs_queue_url
        if not self._queue_url:
            raise ValueError("An SQS queue URL must be provided.")
        self._client = client or boto3.client("sqs", region_name=settings.region_name)

    @property
    def queue_url(self) -> str:
        return self._queue_url

    def receive_messages(self) -> List[Dict[str, Any]]:
        """Block for up to ``wait_time_seconds`` and return a batch of messages."""
        response = self._client.receive_message(
            QueueUrl=self._queue_url,
            MaxNumberOfMessages=self._settings.max_messages,
            VisibilityTimeout=self._settings.visibility_timeout,
            WaitTimeSeconds=self._settings.wait_time_seconds,
        )
        return response.get("Messages", [])

    def delete_message(self, receipt_handle: str) -> None:
        self._client.delete_message(QueueUrl=self._queue_url, ReceiptHandle=receipt_handle)


__all__ = ["SQSClient"]
