"""
MIT License

Copyright (c) 2020-present shay (shayypy)

Permission is hereby granted, free of charge, to any person obtaining a copy
of this software and associated documentation files (the "Software"), to deal
in the Software without restriction, including without limitation the rights
to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
copies of the Software, and to permit persons to whom the Software is
furnished to do so, subject to the following conditions:

The above copyright notice and this permission notice shall be included in all
copies or substantial portions of the Software.

THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
SOFTWARE.
"""

from __future__ import annotations

import datetime
from typing import TYPE_CHECKING, Optional

from .mixins import Hashable
from .user import User
from .utils import parse_time

if TYPE_CHECKING:
    from .types.message import Message as MessagePayload

    from .client import Client


__all__ = (
    'Message',
)


class Message(Hashable):
    """Represents a message in a channel.

    Only pinned messages are retrieved by this library.

    Attributes
    -----------
    id: :class:`int`
        The message's ID.
    channel_id: :class:`int`
        The ID of the channel the message was sent in.
    guild_id: Optional[:class:`int`]
        The ID of the guild the message was sent in, if any.
    author: :class:`User`
        The user that sent the message.
    content: :class:`str`
        The text content of the message.
    created_at: :class:`datetime.datetime`
        When the message was sent.
    edited_at: Optional[:class:`datetime.datetime`]
        When the message was last edited.
    pinned: :class:`bool`
        Whether the message is pinned.
    """

    __slots__ = (
        '_state',
        'id',
        'channel_id',
        'guild_id',
        'author',
        'content',
        'created_at',
        'edited_at',
        'pinned',
    )

    def __init__(self, *, state: Client, data: MessagePayload):
        self._state = state
        self.id: int = int(data['id'])
        self.channel_id: int = int(data['channel_id'])

        guild_id = data.get('guild_id')
        self.guild_id: Optional[int] = int(guild_id) if guild_id is not None else None

        self.author: User = User(state=state, data=data['author'])
        self.content: str = data.get('content', '')
        self.created_at: datetime.datetime = parse_time(data.get('timestamp'))
        self.edited_at: Optional[datetime.datetime] = parse_time(data.get('edited_timestamp'))
        self.pinned: bool = data.get('pinned', False)

    def __repr__(self) -> str:
        return f'<Message id={self.id!r} channel_id={self.channel_id!r} author={self.author!r}>'

    async def pin(self) -> None:
        """|coro|

        Pin this message.
        """
        await self._state.pin_message(self.channel_id, self.id)
        self.pinned = True

    async def unpin(self) -> None:
        """|coro|

        Unpin this message.
        """
        await self._state.unpin_message(self.channel_id, self.id)
        self.pinned = False

    async def ack(self, *, token: Optional[str] = None) -> Optional[str]:
        """|coro|

        Mark this message as read.
        """
        return await self._state.ack(self.channel_id, self.id, token=token)
