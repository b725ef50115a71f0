"""Redis storage for the relay lists."""

from .ids import (
    ChatId, ReposterError, ChatIdDecodeError,
    encode_chat_id, decode_chat_id, decode_chat_ids
)
from .lists import ListName, ListStore
from .connection import create_redis, check_connection, init_store, close_store

__all__ = [
    "ChatId",
    "ReposterError",
    "ChatIdDecodeError",
    "encode_chat_id",
    "decode_chat_id",
    "decode_chat_ids",
    "ListName",
    "ListStore",
    "create_redis",
    "check_connection",
    "init_store",
    "close_store"
]
