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
from typing import TYPE_CHECKING, List, Optional

from .mixins import Hashable
from .utils import parse_time, snowflake_time

if TYPE_CHECKING:
    from .types.user import (
        Ban as BanPayload,
        Member as MemberPayload,
        User as UserPayload,
    )

    from .client import Client


__all__ = (
    'Ban',
    'BanEntry',
    'Member',
    'User',
)


class User(Hashable):
    """Represents a user.

    .. container:: operations

        .. describe:: x == y

            Checks if two users are equal.

        .. describe:: x != y

            Checks if two users are not equal.

        .. describe:: hash(x)

            Returns the user's hash.

        .. describe:: str(x)

            Returns the user's name with discriminator.

    Attributes
    -----------
    id: :class:`int`
        The user's ID.
    name: :class:`str`
        The user's username.
    discriminator: :class:`str`
        The user's four-digit discriminator.
    avatar: Optional[:class:`str`]
        The user's avatar hash, if any.
    bot: :class:`bool`
        Whether the user is a bot account.
    """

    __slots__ = (
        '_state',
        'id',
        'name',
        'discriminator',
        'avatar',
        'bot',
        'system',
    )

    def __init__(self, *, state: Client, data: UserPayload):
        self._state = state
        self.id: int = int(data['id'])
        self.name: str = data.get('username', '')
        self.discriminator: str = data.get('discriminator', '0000')
        self.avatar: Optional[str] = data.get('avatar')
        self.bot: bool = data.get('bot', False)
        self.system: bool = data.get('system', False)

    def __str__(self) -> str:
        return f'{self.name}#{self.discriminator}'

    def __repr__(self) -> str:
        return f'<User id={self.id!r} name={self.name!r} discriminator={self.discriminator!r} bot={self.bot}>'

    @property
    def mention(self) -> str:
        """:class:`str`: The mention string for this user."""
        return f'<@{self.id}>'

    @property
    def created_at(self) -> datetime.datetime:
        """:class:`datetime.datetime`: When the user's account was created."""
        return snowflake_time(self.id)


class Member(Hashable):
    """Represents a member of a guild.

    .. container:: operations

        .. describe:: x == y

            Checks if two members are equal.

        .. describe:: x != y

            Checks if two members are not equal.

        .. describe:: hash(x)

            Returns the member's hash.

        .. describe:: str(x)

            Returns the member's name with discriminator.

    Attributes
    -----------
    user: :class:`User`
        The user this member represents.
    guild_id: Optional[:class:`int`]
        The ID of the guild the member was fetched from.
    nick: Optional[:class:`str`]
        The member's nickname, if any.
    roles: List[:class:`int`]
        The IDs of the roles the member has.
    joined_at: Optional[:class:`datetime.datetime`]
        When the member joined the guild.
    deaf: :class:`bool`
        Whether the member is deafened in voice channels.
    mute: :class:`bool`
        Whether the member is muted in voice channels.
    """

    __slots__ = (
        '_state',
        'user',
        'guild_id',
        'nick',
        'roles',
        'joined_at',
        'premium_since',
        'deaf',
        'mute',
    )

    def __init__(self, *, state: Client, data: MemberPayload, guild_id: Optional[int] = None):
        self._state = state
        self.user: User = User(state=state, data=data['user'])
        self.guild_id: Optional[int] = guild_id

        self.nick: Optional[str] = data.get('nick')
        self.roles: List[int] = [int(role_id) for role_id in data.get('roles') or []]
        self.joined_at: Optional[datetime.datetime] = parse_time(data.get('joined_at'))
        self.premium_since: Optional[datetime.datetime] = parse_time(data.get('premium_since'))
        self.deaf: bool = data.get('deaf', False)
        self.mute: bool = data.get('mute', False)

    def __repr__(self) -> str:
        return f'<Member id={self.id!r} name={self.name!r} nick={self.nick!r} guild_id={self.guild_id!r}>'

    def __str__(self) -> str:
        return str(self.user)

    @property
    def id(self) -> int:
        """:class:`int`: The member's user ID."""
        return self.user.id

    @property
    def name(self) -> str:
        """:class:`str`: Equivalent to :attr:`User.name`"""
        return self.user.name

    @property
    def display_name(self) -> str:
        """:class:`str`: The member's nickname if they have one, otherwise their username."""
        return self.nick if self.nick is not None else self.user.name

    @property
    def mention(self) -> str:
        return self.user.mention

    async def kick(self) -> None:
        """|coro|

        Kick this member from their guild.

        This is equivalent to :meth:`Client.kick`.
        """
        await self._state.kick(self.guild_id, self.id)

    async def ban(self, **kwargs) -> None:
        """|coro|

        Ban this member from their guild.

        This is equivalent to :meth:`Client.ban`.
        """
        await self._state.ban(self.guild_id, self.id, **kwargs)


class Ban:
    """Represents a ban in a guild.

    .. container:: operations

        .. describe:: x == y

            Checks if two bans are equal.

        .. describe:: x != y

            Checks if two bans are not equal.

    Attributes
    -----------
    user: :class:`User`
        The user that is banned.
    reason: Optional[:class:`str`]
        The reason for the ban.
    guild_id: Optional[:class:`int`]
        The ID of the guild the ban is in.
    """

    __slots__ = (
        '_state',
        'user',
        'reason',
        'guild_id',
    )

    def __init__(self, *, state: Client, data: BanPayload, guild_id: Optional[int] = None):
        self._state = state
        self.user: User = User(state=state, data=data['user'])
        self.reason: Optional[str] = data.get('reason')
        self.guild_id: Optional[int] = guild_id

    def __repr__(self) -> str:
        return f'<Ban user={self.user!r} guild_id={self.guild_id!r}>'

    def __eq__(self, other) -> bool:
        return isinstance(other, Ban) and other.guild_id == self.guild_id and other.user == self.user

    async def revoke(self) -> None:
        """|coro|

        Revoke this ban; unban the user it was created for.

        This is equivalent to :meth:`Client.unban`.
        """
        await self._state.unban(self.guild_id, self.user.id)

BanEntry = Ban  # discord.py
