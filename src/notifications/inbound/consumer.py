"""Redis Streams consumer for the inbound topics.

Each topic is a stream; the service reads them through one consumer group
so several instances share the load. A message carries its JSON body in
the `payload` field (a flat field map is accepted too). Messages in a
batch are processed concurrently on a thread pool, each inside its own
domain context, then acknowledged. The router never raises, so every
message read is acknowledged exactly once by this consumer. On startup the
consumer first replays its own pending entries, those it read before a
crash but never acknowledged, and only then reads new messages.
"""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor, wait

import redis
import structlog
from protean.domain import Domain

from notifications.inbound.router import DispatchOutcome, TopicRouter

logger = structlog.get_logger(__name__)

PAYLOAD_FIELD = "payload"


class StreamConsumer:
    def __init__(
        self,
        client: redis.Redis,
        router: TopicRouter,
        domain: Domain,
        group: str,
        consumer_name: str,
        workers: int = 4,
        block_ms: int = 1000,
        batch_size: int = 16,
        retry_delay: float = 1.0,
    ) -> None:
        self.client = client
        self.router = router
        self.domain = domain
        self.group = group
        self.consumer_name = consumer_name
        self.block_ms = block_ms
        self.batch_size = batch_size
        self.retry_delay = retry_delay

        self._pool = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="notifications-worker")
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @classmethod
    def from_settings(cls, settings, router: TopicRouter, domain: Domain) -> StreamConsumer:
        return cls(
            client=redis.Redis.from_url(settings.redis_url, decode_responses=True),
            router=router,
            domain=domain,
            group=settings.consumer_group,
            consumer_name=settings.consumer_name,
            workers=settings.consumer_workers,
            block_ms=settings.consumer_block_ms,
        )

    def ensure_groups(self) -> None:
        """Create the consumer group on every topic stream if missing."""
        for topic in self.router.topics:
            try:
                self.client.xgroup_create(topic, self.group, id="0", mkstream=True)
                logger.info("Consumer group created", topic=topic, group=self.group)
            except redis.ResponseError as e:
                if "BUSYGROUP" not in str(e):
                    raise

    def handle(self, topic: str, message_id: str, fields: dict | None) -> DispatchOutcome:
        """Process one message and acknowledge it."""
        if fields is None:
            # Pending entry trimmed from the stream before it was processed
            logger.warning("Pending message no longer in stream", topic=topic, message_id=message_id)
            self.client.xack(topic, self.group, message_id)
            return DispatchOutcome.DROPPED

        body = fields.get(PAYLOAD_FIELD, fields)
        with self.domain.domain_context():
            outcome = self.router.dispatch(topic, body)
        self.client.xack(topic, self.group, message_id)
        return outcome

    def _process(self, response) -> int:
        futures = [
            self._pool.submit(self.handle, topic, message_id, fields)
            for topic, messages in response or []
            for message_id, fields in messages
        ]
        wait(futures)

        for future in futures:
            if future.exception() is not None:
                logger.error("Message handling failed", error=str(future.exception()))

        return len(futures)

    def poll(self) -> int:
        """Read one batch of new messages across all topics and process it. Returns the batch size."""
        streams = {topic: ">" for topic in self.router.topics}
        response = self.client.xreadgroup(
            self.group,
            self.consumer_name,
            streams,
            count=self.batch_size,
            block=self.block_ms,
        )
        return self._process(response)

    def recover(self) -> int:
        """Reprocess messages this consumer read earlier but never acknowledged.

        Reading a stream from an explicit id returns this consumer's pending
        entries after that id, so each topic's cursor advances past every
        batch and a topic drops out once its backlog is exhausted.
        """
        cursors = {topic: "0" for topic in self.router.topics}
        recovered = 0
        while cursors and not self._stop.is_set():
            response = self.client.xreadgroup(
                self.group,
                self.consumer_name,
                dict(cursors),
                count=self.batch_size,
            )
            backlog = []
            for topic, messages in response or []:
                if messages:
                    cursors[topic] = messages[-1][0]
                    backlog.append((topic, messages))
                else:
                    cursors.pop(topic, None)
            if not backlog:
                break
            recovered += self._process(backlog)

        if recovered:
            logger.info("Pending messages recovered", count=recovered, consumer=self.consumer_name)
        return recovered

    def run(self) -> None:
        logger.info("Stream consumer started", group=self.group, consumer=self.consumer_name)
        recovered = False
        while not self._stop.is_set():
            try:
                if not recovered:
                    self.recover()
                    recovered = True
                self.poll()
            except redis.RedisError as e:
                logger.error("Event bus read failed", error=str(e))
                self._stop.wait(self.retry_delay)
        logger.info("Stream consumer stopped", group=self.group, consumer=self.consumer_name)

    def start(self) -> None:
        self.ensure_groups()
        self._stop.clear()
        self._thread = threading.Thread(target=self.run, name="notifications-consumer", daemon=True)
        self._thread.start()

    def stop(self, timeout: float = 5.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        self._pool.shutdown(wait=True)
        self.client.close()
