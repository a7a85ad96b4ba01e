"""Subscribe to collection changes and dispatch queued notifications."""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Callable, Dict, Optional

from pydantic import BaseModel, ConfigDict, ValidationError

from carthooks.clients.aws_sqs import SQSClient
from carthooks.core.config import WatcherSettings
from carthooks.core.errors import WatcherError
from carthooks.schemas.records import EventMessage, WatchDataOptions
from carthooks.schemas.result import Result

logger = logging.getLogger(__name__)

Handler = Callable[[Dict[str, Any]], Any]


class WatcherConfig(BaseModel):
    """Immutable watcher configuration.

    The ``with_*`` helpers return updated copies, so a partially built config
    can be shared safely.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    client: Any
    watcher_id: str
    app_id: int = 0
    collection_id: int = 0
    queue_url: str = ""
    region: str = "ap-southeast-1"
    filters: Optional[Dict[str, Any]] = None
    handler: Optional[Handler] = None

    @classmethod
    def build(
        cls,
        client: Any,
        watcher_id: str,
        *,
        app_id: int,
        collection_id: int,
        queue_url: str,
        region: str = "ap-southeast-1",
        filters: Optional[Dict[str, Any]] = None,
        handler: Optional[Handler] = None,
    ) -> "WatcherConfig":
        return cls(
            client=client,
            watcher_id=watcher_id,
            app_id=app_id,
            collection_id=collection_id,
            queue_url=queue_url,
            region=region,
            filters=filters,
            handler=handler,
        )

    def with_app(self, app_id: int, collection_id: int) -> "WatcherConfig":
        return self.model_copy(update={"app_id": app_id, "collection_id": collection_id})

    def with_sqs(self, queue_url: str, region: str) -> "WatcherConfig":
        return self.model_copy(update={"queue_url": queue_url, "region": region})

    def with_filters(self, filters: Dict[str, Any]) -> "WatcherConfig":
        return self.model_copy(update={"filters": dict(filters)})

    def with_handler(self, handler: Handler) -> "WatcherConfig":
        return self.model_copy(update={"handler": handler})

    @property
    def watch_name(self) -> str:
        return f"watch-{self.app_id}-{self.collection_id}"


class Watcher:
    """Register a watch with the API, then long-poll SQS for its messages.

    Messages are deleted only after the handler returns; a failing message is
    left on the queue to reappear after its visibility timeout.
    """

    def __init__(
        self,
        config: WatcherConfig,
        settings: Optional[WatcherSettings] = None,
        sqs_client: Optional[SQSClient] = None,
    ) -> None:
        self._config = config
        self._settings = settings or WatcherSettings()
        self._sqs = sqs_client
        self._running = False
        self._stopping = False

    @property
    def running(self) -> bool:
        return self._running

    def _queue(self) -> SQSClient:
        if self._sqs is None:
            settings = self._settings.model_copy(update={"region_name": self._config.region})
            self._sqs = SQSClient(settings, queue_url=self._config.queue_url)
        return self._sqs

    async def subscribe(self) -> Result:
        options = WatchDataOptions(
            endpoint_url=self._config.queue_url,
            endpoint_type="sqs",
            name=self._config.watch_name,
            app_id=self._config.app_id,
            collection_id=self._config.collection_id,
            filters=self._config.filters,
            age=self._settings.subscription_age_seconds,
            watch_start_time=0,
        )
        result = await self._config.client.start_watch_data(options)
        if not result.success:
            raise WatcherError(f"failed to start watch data: {result.error_message}")
        logger.info("Monitoring task registered", extra={"watch_name": options.name})
        return result

    async def run(self) -> None:
        if self._running:
            raise WatcherError("watcher is already running")

        await self.subscribe()
        self._running = True
        self._stopping = False
        logger.info("Watcher polling SQS", extra={"watcher_id": self._config.watcher_id})
        try:
            while not self._stopping:
                try:
                    processed = await self.poll_once()
                except Exception:
                    logger.exception("Error receiving SQS messages")
                    await asyncio.sleep(self._settings.error_backoff_seconds)
                    continue
                if processed == 0 and not self._stopping:
                    await asyncio.sleep(self._settings.idle_sleep_seconds)
        finally:
            self._running = False
            logger.info("Watcher stopped", extra={"watcher_id": self._config.watcher_id})

    def stop(self) -> None:
        """Ask the poll loop to exit after the current batch."""
        self._stopping = True

    async def poll_once(self) -> int:
        """Receive one batch and return how many messages were received."""
        queue = self._queue()
        messages = await asyncio.to_thread(queue.receive_messages)
        for message in messages:
            try:
                await self.process_message(message)
            except Exception:
                logger.warning(
                    "Message processing failed",
                    exc_info=True,
                    extra={"message_id": message.get("MessageId")},
                )
                continue

            try:
                await asyncio.to_thread(queue.delete_message, message["ReceiptHandle"])
            except Exception:
                logger.warning(
                    "Failed to delete message",
                    exc_info=True,
                    extra={"message_id": message.get("MessageId")},
                )
        return len(messages)

    async def process_message(self, message: Dict[str, Any]) -> EventMessage:
        body = message.get("Body")
        if body is None:
            raise WatcherError("message body is missing")

        try:
            event = EventMessage.model_validate_json(body)
        except ValidationError as exc:
            raise WatcherError(f"failed to parse message body: {exc}") from exc

        if event.payload is None:
            raise WatcherError("message payload is missing")
        if "id" not in event.payload:
            raise WatcherError("incorrect message format, missing payload.id")

        handler = self._config.handler
        if handler is not None:
            outcome = handler(event.payload)
            if inspect.isawaitable(outcome):
                await outcome
        return event


__all__ = ["Watcher", "WatcherConfig"]
