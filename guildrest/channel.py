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
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Union

from .enums import ChannelType, OverwriteType, try_enum
from .errors import InvalidArgument
from .mixins import Hashable
from .utils import get_id, snowflake_time

if TYPE_CHECKING:
    from .types.channel import (
        Channel as ChannelPayload,
        PermissionOverwrite as PermissionOverwritePayload,
    )

    from .abc import Snowflake
    from .client import Client
    from .message import Message


__all__ = (
    'GuildChannel',
    'PermissionOverwrite',
)


class PermissionOverwrite:
    """Represents a channel-specific permission overwrite for a role or member.

    Parameters
    -----------
    id: Union[:class:`int`, :class:`~.abc.Snowflake`]
        The role or user that the overwrite applies to.
    type: :class:`OverwriteType`
        Whether ``id`` is a role or a member.
    allow: :class:`int`
        The permission bit set to explicitly allow.
    deny: :class:`int`
        The permission bit set to explicitly deny.
    """

    __slots__ = ('id', 'type', 'allow', 'deny')

    def __init__(
        self,
        id: Union[int, Snowflake],
        type: OverwriteType = OverwriteType.role,
        *,
        allow: int = 0,
        deny: int = 0,
    ):
        if not isinstance(type, OverwriteType):
            raise InvalidArgument(f'type must be OverwriteType, not {type.__class__.__name__}')
        if allow & deny:
            raise InvalidArgument('allow and deny must not share permission bits')

        self.id: int = get_id(id)
        self.type: OverwriteType = type
        self.allow: int = allow
        self.deny: int = deny

    def __repr__(self) -> str:
        return f'<PermissionOverwrite id={self.id!r} type={self.type!s} allow={self.allow} deny={self.deny}>'

    def __eq__(self, other) -> bool:
        return (
            isinstance(other, PermissionOverwrite)
            and other.id == self.id
            and other.type is self.type
            and other.allow == self.allow
            and other.deny == self.deny
        )

    @classmethod
    def from_dict(cls, data: PermissionOverwritePayload) -> PermissionOverwrite:
        return cls(
            int(data['id']),
            OverwriteType(data['type']),
            allow=int(data.get('allow', 0)),
            deny=int(data.get('deny', 0)),
        )

    def to_dict(self, *, include_id: bool = True) -> Dict[str, Any]:
        payload = {
            'type': self.type.value,
            'allow': self.allow,
            'deny': self.deny,
        }
        if include_id:
            payload['id'] = str(self.id)

        return payload


class GuildChannel(Hashable):
    """Represents a channel, usually one in a guild.

    .. container:: operations

        .. describe:: x == y

            Checks if two channels are equal.

        .. describe:: x != y

            Checks if two channels are not equal.

        .. describe:: hash(x)

            Returns the channel's hash.

        .. describe:: str(x)

            Returns the channel's name.

    Attributes
    -----------
    id: :class:`int`
        The channel's ID.
    type: :class:`ChannelType`
        The channel's type.
    guild_id: Optional[:class:`int`]
        The ID of the guild the channel belongs to. ``None`` for private channels.
    name: Optional[:class:`str`]
        The channel's name.
    position: Optional[:class:`int`]
        The channel's sorting position.
    topic: Optional[:class:`str`]
        The channel's topic.
    nsfw: :class:`bool`
        Whether the channel is marked NSFW.
    bitrate: Optional[:class:`int`]
        The bitrate of a voice channel, in bits.
    user_limit: Optional[:class:`int`]
        The user limit of a voice channel. ``0`` means no limit.
    slowmode_delay: :class:`int`
        Seconds a user has to wait before sending another message.
    category_id: Optional[:class:`int`]
        The ID of the parent category, if any.
    last_message_id: Optional[:class:`int`]
        The ID of the last message sent in the channel.
    overwrites: List[:class:`PermissionOverwrite`]
        The channel-specific permission overwrites.
    """

    __slots__ = (
        '_state',
        'id',
        'type',
        'guild_id',
        'name',
        'position',
        'topic',
        'nsfw',
        'bitrate',
        'user_limit',
        'slowmode_delay',
        'category_id',
        'last_message_id',
        'overwrites',
    )

    def __init__(self, *, state: Client, data: ChannelPayload):
        self._state = state
        self.id: int = int(data['id'])
        self.type: ChannelType = try_enum(ChannelType, data['type'])

        guild_id = data.get('guild_id')
        self.guild_id: Optional[int] = int(guild_id) if guild_id is not None else None

        self.name: Optional[str] = data.get('name')
        self.position: Optional[int] = data.get('position')
        self.topic: Optional[str] = data.get('topic')
        self.nsfw: bool = data.get('nsfw', False)
        self.bitrate: Optional[int] = data.get('bitrate')
        self.user_limit: Optional[int] = data.get('user_limit')
        self.slowmode_delay: int = data.get('rate_limit_per_user', 0)

        parent_id = data.get('parent_id')
        self.category_id: Optional[int] = int(parent_id) if parent_id is not None else None
        last_message_id = data.get('last_message_id')
        self.last_message_id: Optional[int] = int(last_message_id) if last_message_id is not None else None

        self.overwrites: List[PermissionOverwrite] = [
            PermissionOverwrite.from_dict(overwrite)
            for overwrite in data.get('permission_overwrites') or []
        ]

    def __str__(self) -> str:
        return self.name or ''

    def __repr__(self) -> str:
        return f'<GuildChannel id={self.id!r} name={self.name!r} type={self.type!s} guild_id={self.guild_id!r}>'

    @property
    def mention(self) -> str:
        """:class:`str`: The string that allows you to mention the channel."""
        return f'<#{self.id}>'

    @property
    def created_at(self) -> datetime.datetime:
        """:class:`datetime.datetime`: When the channel was created."""
        return snowflake_time(self.id)

    async def edit(self, **kwargs) -> None:
        """|coro|

        Edit this channel. Takes the same keyword arguments as
        :meth:`Client.modify_channel`.
        """
        await self._state.modify_channel(self.id, **kwargs)

    async def delete(self) -> None:
        """|coro|

        Delete this channel.
        """
        await self._state.delete_channel(self.id)

    async def set_permissions(self, overwrite: PermissionOverwrite) -> None:
        """|coro|

        Create or replace a permission overwrite on this channel.
        """
        await self._state.edit_channel_permission(self.id, overwrite)

    async def pins(self) -> List[Message]:
        """|coro|

        Fetch the messages that are pinned in this channel.
        """
        return await self._state.pinned_messages(self.id)

    async def trigger_typing(self) -> None:
        """|coro|

        Begin your typing indicator in this channel.
        """
        await self._state.typing(self.id)
