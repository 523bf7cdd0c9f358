# elgar/infrastructure/messaging/rabbitmq_notifier.py

import asyncio
import json

import aio_pika

EXCHANGE_ACTION_REPORTS = "action_reports"


class RabbitMQNotifier:
    """Publishes report transition messages to a durable topic exchange. Implements ReportNotifier."""

    def __init__(self, url: str, exchange_name: str = EXCHANGE_ACTION_REPORTS):
        self._url = url
        self._exchange_name = exchange_name
        self._connection = None
        self._channel = None
        self._exchange = None
        self._connect_lock = asyncio.Lock()

    async def connect(self):
        """Open the connection once; concurrent first publishers wait for the same one."""
        async with self._connect_lock:
            if self._exchange is not None:
                return
            self._connection = await aio_pika.connect_robust(self._url)
            self._channel = await self._connection.channel()
            self._exchange = await self._channel.declare_exchange(
                self._exchange_name,
                aio_pika.ExchangeType.TOPIC,
                durable=True,
            )

    async def publish(self, routing_key: str, message: dict) -> None:
        if self._exchange is None:
            await self.connect()

        msg = aio_pika.Message(
            body=json.dumps(message, ensure_ascii=False).encode(),
            content_type="application/json",
            delivery_mode=aio_pika.DeliveryMode.PERSISTENT,
            headers={"correlation_id": message.get("correlation_id") or ""},
        )

        await self._exchange.publish(msg, routing_key=routing_key)

    async def close(self) -> None:
        if self._connection is not None:
            await self._connection.close()
        self._connection = self._channel = self._exchange = None
