"""
Chat identity type and its string encoding in Redis.
"""
import re
from typing import Iterable, List, NewType, Union

ChatId = NewType("ChatId", int)

# Telegram chat ids are signed 64-bit integers
_MIN_CHAT_ID = -(2 ** 63)
_MAX_CHAT_ID = 2 ** 63 - 1

_CHAT_ID_RE = re.compile(r"[+-]?[0-9]+")


class ReposterError(Exception):
    """Base class for reposter errors."""


class ChatIdDecodeError(ReposterError, ValueError):
    """A stored or typed chat identity is not a 64-bit integer."""

    def __init__(self, raw: object):
        self.raw = raw
        super().__init__(f"invalid chat id: {raw!r}")


def encode_chat_id(chat_id: int) -> str:
    """Canonical string form stored in Redis."""
    return str(int(chat_id))


def decode_chat_id(raw: Union[str, bytes]) -> ChatId:
    """Parse a stored or user-supplied identity back to a ``ChatId``."""
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8", errors="replace")
    if not _CHAT_ID_RE.fullmatch(raw):
        raise ChatIdDecodeError(raw)
    value = int(raw, 10)
    if not _MIN_CHAT_ID <= value <= _MAX_CHAT_ID:
        raise ChatIdDecodeError(raw)
    return ChatId(value)


def decode_chat_ids(raws: Iterable[Union[str, bytes]]) -> List[ChatId]:
    """Decode every element, failing on the first bad one."""
    return [decode_chat_id(raw) for raw in raws]
