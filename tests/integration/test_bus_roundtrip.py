"""Integration test: gateway -> bus -> handler -> reply gateway roundtrip."""

from dataclasses import dataclass
from typing import Annotated, Any

import pytest

from message_mapping import Header, Headers, Message, Properties
from message_mapping.bus import MemoryMessageBus, MessagingGateway


@dataclass(frozen=True)
class Order:
    order_id: str
    qty: int


@dataclass(frozen=True)
class Receipt:
    order_id: str
    accepted: bool


def submit_order(
    order: Order,
    customer: Annotated[str, Header("customer")],
    attrs: Annotated[dict[str, Any], Headers()],
) -> None: ...


def emit_receipt(receipt: Receipt, correlation_id: Annotated[str, Header()]) -> None: ...


@pytest.mark.asyncio
async def test_order_flow_roundtrip():
    bus = MemoryMessageBus()
    await bus.start()

    receipts: list[Message] = []
    audit: list[dict[str, str]] = []
    reply = MessagingGateway(bus, "receipts", emit_receipt)

    async def on_order(
        customer: Annotated[str, Header()],
        priority: Annotated[int, Header(required=False)],
        order: Order,
    ) -> Receipt:
        receipt = Receipt(order.order_id, accepted=order.qty > 0)
        await reply.send(receipt, f"{customer}:{order.order_id}")
        return receipt

    def on_order_audit(props: Properties) -> None:
        audit.append(props)

    def on_receipt(message: Message) -> None:
        receipts.append(message)

    await bus.subscribe("orders", "fulfilment", on_order)
    await bus.subscribe("orders", "audit", on_order_audit)
    await bus.subscribe("receipts", "notify", on_receipt)

    gateway = MessagingGateway(bus, "orders", submit_order)
    sent = await gateway.send(Order("ord-9", 3), "acme", {"priority": 1, "channel": "web"})

    assert dict(sent.headers) == {"customer": "acme", "priority": 1, "channel": "web"}
    assert audit == [{"customer": "acme", "channel": "web"}]

    (receipt_message,) = receipts
    assert receipt_message.payload == Receipt("ord-9", accepted=True)
    assert receipt_message.headers["correlation_id"] == "acme:ord-9"

    assert bus.dead_letters == []
    assert bus.messages_processed == 3
    await bus.stop()
