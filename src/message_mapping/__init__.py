"""Bind messages to handler arguments and handler arguments to messages."""

from message_mapping.core.errors import (
    ArityMismatchError,
    BindingDefinitionError,
    MessageMappingError,
    MessagingError,
    MissingPayloadError,
    MultipleMessageOrPayloadError,
    NonStringHeaderKeyError,
    NullPayloadError,
    RequiredHeaderMissingError,
)
from message_mapping.core.message import Message, MessageBuilder, MessageHeaders
from message_mapping.mapping.annotations import Header, Headers, Properties
from message_mapping.mapping.mapper import MethodParameterMessageMapper

__all__ = [
    "ArityMismatchError",
    "BindingDefinitionError",
    "Header",
    "Headers",
    "Message",
    "MessageBuilder",
    "MessageHeaders",
    "MessageMappingError",
    "MessagingError",
    "MethodParameterMessageMapper",
    "MissingPayloadError",
    "MultipleMessageOrPayloadError",
    "NonStringHeaderKeyError",
    "NullPayloadError",
    "Properties",
    "RequiredHeaderMissingError",
]
