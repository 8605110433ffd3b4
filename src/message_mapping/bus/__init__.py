"""In-process message bus and gateway built on the argument mapper."""

from message_mapping.bus.gateway import MessagingGateway
from message_mapping.bus.memory_bus import MemoryMessageBus

__all__ = ["MemoryMessageBus", "MessagingGateway"]
