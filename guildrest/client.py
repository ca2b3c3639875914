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

import aiohttp
import logging
from typing import (
    TYPE_CHECKING,
    Any,
    AsyncIterator,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    Type,
    Union,
)

from .channel import GuildChannel, PermissionOverwrite
from .enums import ChannelType
from .errors import InvalidArgument
from .http import HTTPClient, MEMBERS_PAGE_LIMIT
from .message import Message
from .user import Ban, Member
from .utils import MISSING, get_id

if TYPE_CHECKING:
    from types import TracebackType
    from typing_extensions import Self

    from .abc import Snowflake

    SnowflakeLike = Union[int, str, Snowflake]

log = logging.getLogger(__name__)

__all__ = (
    'Client',
)


def _validate_prune_days(days: int) -> int:
    if days == 0:
        days = 7
    if not 1 <= days <= 30:
        raise InvalidArgument(f'days must be between 1 and 30, not {days}')
    return days


class Client:
    """The client class for interfacing with the REST API.

    Every method maps onto a single endpoint, with the exception of the
    member listing helpers which paginate over one.

    Parameters
    -----------
    token: Optional[:class:`str`]
        The token to authenticate with.
    bot: :class:`bool`
        Whether ``token`` belongs to a bot account. Bot tokens are sent with
        a ``Bot`` prefix. Defaults to ``True``.
    base_url: Optional[:class:`str`]
        Override the base URL that requests are made against.
    max_retries: :class:`int`
        How many times a request is attempted before giving up on rate
        limits and server errors. Defaults to ``5``.
    session: Optional[:class:`aiohttp.ClientSession`]
        The session to use for requests. One is created when not given,
        and closed by :meth:`close`.

    Attributes
    -----------
    http: :class:`HTTPClient`
        The HTTP client that requests are made with.
    """

    def __init__(
        self,
        token: Optional[str] = None,
        *,
        bot: bool = True,
        base_url: Optional[str] = None,
        max_retries: int = 5,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self._closed: bool = False
        self.http: HTTPClient = HTTPClient(
            token,
            bot=bot,
            base_url=base_url,
            max_retries=max_retries,
            session=session,
        )

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_value: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        await self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    async def close(self) -> None:
        """|coro|

        Close the underlying HTTP session.
        """
        if self._closed:
            return

        self._closed = True
        await self.http.close()

    # members

    async def member(self, guild_id: SnowflakeLike, user_id: SnowflakeLike, /) -> Member:
        """|coro|

        Fetch a member of a guild.

        Raises
        -------
        NotFound
            The guild or member does not exist.
        """
        guild_id = get_id(guild_id)
        data = await self.http.get_member(guild_id, get_id(user_id))
        return Member(state=self, data=data, guild_id=guild_id)

    async def members(self, guild_id: SnowflakeLike, limit: int = 0) -> List[Member]:
        """|coro|

        Fetch the members of a guild, lowest ID first.

        This is equivalent to :meth:`members_after` with ``after=0``.
        """
        return await self.members_after(guild_id, 0, limit)

    async def members_after(
        self,
        guild_id: SnowflakeLike,
        after: SnowflakeLike = 0,
        limit: int = 0,
    ) -> List[Member]:
        """|coro|

        Fetch the members of a guild whose IDs are greater than ``after``.

        This method automatically paginates until it reaches ``limit``, or,
        if ``limit`` is ``0``, until every member in the range is fetched.
        The underlying endpoint returns at most 1000 members per request, so
        at most ``ceil(limit / 1000)`` requests are made, fewer if the guild
        runs out of members first.

        Parameters
        -----------
        guild_id: Union[:class:`int`, :class:`~.abc.Snowflake`]
            The guild to fetch members from.
        after: Union[:class:`int`, :class:`~.abc.Snowflake`]
            Only members with an ID strictly greater than this are returned.
            Defaults to ``0``, the start of the list.
        limit: :class:`int`
            The maximum number of members to return. ``0`` means no limit.

        Returns
        --------
        List[:class:`.Member`]
            The members, in ascending ID order.

        Raises
        -------
        HTTPException
            Fetching a page failed. The members collected from earlier
            pages are available on the exception's ``partial`` attribute.
        """
        members: List[Member] = []
        try:
            async for page in self._member_pages(guild_id, after, limit):
                members.extend(page)
        except Exception as exc:
            exc.partial = members
            raise

        return members

    async def fetch_members(
        self,
        guild_id: SnowflakeLike,
        *,
        after: SnowflakeLike = 0,
        limit: int = 0,
    ) -> AsyncIterator[Member]:
        """Return an :term:`asynchronous iterator` over the members of a guild.

        Pages are requested lazily as the iterator is consumed, so a failure
        while fetching a page is raised only after the members of earlier
        pages have been yielded.

        Examples
        ---------

        Usage ::

            async for member in client.fetch_members(guild_id, limit=150):
                print(member.name)

        Parameters
        -----------
        guild_id: Union[:class:`int`, :class:`~.abc.Snowflake`]
            The guild to fetch members from.
        after: Union[:class:`int`, :class:`~.abc.Snowflake`]
            Only members with an ID strictly greater than this are yielded.
        limit: :class:`int`
            The maximum number of members to yield. ``0`` means no limit.

        Yields
        -------
        :class:`.Member`
            A member of the guild, lowest ID first.
        """
        async for page in self._member_pages(guild_id, after, limit):
            for member in page:
                yield member

    async def _member_pages(
        self,
        guild_id: SnowflakeLike,
        after: SnowflakeLike,
        limit: int,
    ) -> AsyncIterator[List[Member]]:
        if limit < 0:
            raise InvalidArgument(f'limit must not be negative, not {limit}')

        guild_id = get_id(guild_id)
        after = get_id(after)
        unlimited = limit == 0

        while unlimited or limit > 0:
            fetch = MEMBERS_PAGE_LIMIT
            if not unlimited:
                fetch = min(fetch, limit)
                limit -= fetch

            log.debug('Fetching up to %s members of guild %s after %s', fetch, guild_id, after)
            page = await self._members_page(guild_id, after, fetch)
            del page[fetch:]
            yield page

            # The guild has run out of members, even if the limit has not been reached
            if len(page) < MEMBERS_PAGE_LIMIT:
                break

            after = page[-1].id

    async def _members_page(self, guild_id: int, after: int, limit: int) -> List[Member]:
        data = await self.http.get_members(guild_id, limit=limit, after=after)
        return [Member(state=self, data=member_data, guild_id=guild_id) for member_data in data]

    async def add_member(
        self,
        guild_id: SnowflakeLike,
        user_id: SnowflakeLike,
        *,
        access_token: str,
        nick: str = MISSING,
        roles: Sequence[SnowflakeLike] = MISSING,
        mute: bool = MISSING,
        deaf: bool = MISSING,
    ) -> Optional[Member]:
        """|coro|

        Add a user to a guild with an OAuth2 access token granted with the
        ``guilds.join`` scope to your application.

        The client must be authenticated with a bot token belonging to the
        same application, and the bot must be in the guild with the
        ``CREATE_INSTANT_INVITE`` permission.

        Parameters
        -----------
        access_token: :class:`str`
            The user's OAuth2 access token.
        nick: :class:`str`
            The nickname to give the member. Requires ``MANAGE_NICKNAMES``.
        roles: List[Union[:class:`int`, :class:`~.abc.Snowflake`]]
            The roles to assign. Requires ``MANAGE_ROLES``.
        mute: :class:`bool`
            Whether the member is muted in voice channels. Requires ``MUTE_MEMBERS``.
        deaf: :class:`bool`
            Whether the member is deafened in voice channels. Requires ``DEAFEN_MEMBERS``.

        Returns
        --------
        Optional[:class:`.Member`]
            The new member, or ``None`` if the user was already a member.
        """
        payload: Dict[str, Any] = {
            'access_token': access_token,
        }
        if nick is not MISSING:
            payload['nick'] = nick
        if roles is not MISSING:
            payload['roles'] = [str(get_id(role)) for role in roles]
        if mute is not MISSING:
            payload['mute'] = mute
        if deaf is not MISSING:
            payload['deaf'] = deaf

        guild_id = get_id(guild_id)
        data = await self.http.add_member(guild_id, get_id(user_id), payload=payload)
        if not data:
            # 204, already a member
            return None

        return Member(state=self, data=data, guild_id=guild_id)

    async def modify_member(
        self,
        guild_id: SnowflakeLike,
        user_id: SnowflakeLike,
        *,
        nick: Optional[str] = MISSING,
        roles: Sequence[SnowflakeLike] = MISSING,
        mute: bool = MISSING,
        deaf: bool = MISSING,
        voice_channel: Optional[SnowflakeLike] = MISSING,
        reason: Optional[str] = None,
    ) -> None:
        """|coro|

        Edit a member of a guild. Only the given keyword arguments are sent.

        Parameters
        -----------
        nick: Optional[:class:`str`]
            The new nickname. ``None`` removes it.
        roles: List[Union[:class:`int`, :class:`~.abc.Snowflake`]]
            The member's full new set of roles.
        mute: :class:`bool`
            Whether the member is muted in voice channels.
        deaf: :class:`bool`
            Whether the member is deafened in voice channels.
        voice_channel: Optional[Union[:class:`int`, :class:`~.abc.Snowflake`]]
            The voice channel to move the member to, if they are connected
            to voice. ``None`` disconnects them.
        reason: Optional[:class:`str`]
            The reason shown in the audit log.
        """
        payload: Dict[str, Any] = {}
        if nick is not MISSING:
            payload['nick'] = nick
        if roles is not MISSING:
            payload['roles'] = [str(get_id(role)) for role in roles]
        if mute is not MISSING:
            payload['mute'] = mute
        if deaf is not MISSING:
            payload['deaf'] = deaf
        if voice_channel is not MISSING:
            payload['channel_id'] = str(get_id(voice_channel)) if voice_channel is not None else None

        await self.http.edit_member(get_id(guild_id), get_id(user_id), payload=payload, reason=reason)

    async def prune_count(self, guild_id: SnowflakeLike, days: int = 7) -> int:
        """|coro|

        Get how many members would be removed by a prune.

        Requires the ``KICK_MEMBERS`` permission.

        Parameters
        -----------
        days: :class:`int`
            How many days of inactivity a member needs to be pruned, between
            1 and 30. ``0`` is treated as the default of 7.
        """
        days = _validate_prune_days(days)
        data = await self.http.get_prune_count(get_id(guild_id), days=days)
        return data['pruned']

    async def prune(self, guild_id: SnowflakeLike, days: int = 7, *, reason: Optional[str] = None) -> None:
        """|coro|

        Begin a prune without waiting for the number of members removed.
        Recommended for large guilds.

        Requires the ``KICK_MEMBERS`` permission.
        """
        days = _validate_prune_days(days)
        await self.http.prune_members(get_id(guild_id), days=days, compute_prune_count=False, reason=reason)

    async def prune_with_count(self, guild_id: SnowflakeLike, days: int = 7, *, reason: Optional[str] = None) -> int:
        """|coro|

        Prune the guild and return the number of members removed.

        Requires the ``KICK_MEMBERS`` permission.
        """
        days = _validate_prune_days(days)
        data = await self.http.prune_members(get_id(guild_id), days=days, compute_prune_count=True, reason=reason)
        return data['pruned']

    async def kick(self, guild_id: SnowflakeLike, user_id: SnowflakeLike, *, reason: Optional[str] = None) -> None:
        """|coro|

        Remove a member from a guild.

        Requires the ``KICK_MEMBERS`` permission.
        """
        await self.http.kick_member(get_id(guild_id), get_id(user_id), reason=reason)

    # bans

    async def bans(self, guild_id: SnowflakeLike, /) -> List[Ban]:
        """|coro|

        Get every ban in a guild.

        Requires the ``BAN_MEMBERS`` permission.
        """
        guild_id = get_id(guild_id)
        data = await self.http.get_bans(guild_id)
        return [Ban(state=self, data=ban_data, guild_id=guild_id) for ban_data in data]

    async def get_ban(self, guild_id: SnowflakeLike, user_id: SnowflakeLike, /) -> Ban:
        """|coro|

        Get the ban for a user.

        Requires the ``BAN_MEMBERS`` permission.

        Raises
        -------
        NotFound
            The user is not banned.
        """
        guild_id = get_id(guild_id)
        data = await self.http.get_ban(guild_id, get_id(user_id))
        return Ban(state=self, data=data, guild_id=guild_id)

    async def ban(
        self,
        guild_id: SnowflakeLike,
        user_id: SnowflakeLike,
        *,
        delete_message_days: Optional[int] = None,
        reason: Optional[str] = None,
    ) -> None:
        """|coro|

        Ban a user, optionally deleting the messages they recently sent.

        Requires the ``BAN_MEMBERS`` permission.

        Parameters
        -----------
        delete_message_days: Optional[:class:`int`]
            How many days of messages to delete, up to 7. Larger values are
            lowered to 7.
        reason: Optional[:class:`str`]
            The reason for the ban.
        """
        if delete_message_days is not None:
            if delete_message_days < 0:
                raise InvalidArgument('delete_message_days must not be negative')
            delete_message_days = min(delete_message_days, 7)

        await self.http.ban(
            get_id(guild_id),
            get_id(user_id),
            delete_message_days=delete_message_days,
            reason=reason,
        )

    async def unban(self, guild_id: SnowflakeLike, user_id: SnowflakeLike, *, reason: Optional[str] = None) -> None:
        """|coro|

        Remove the ban for a user.

        Requires the ``BAN_MEMBERS`` permission.
        """
        await self.http.unban(get_id(guild_id), get_id(user_id), reason=reason)

    # channels

    async def channels(self, guild_id: SnowflakeLike, /) -> List[GuildChannel]:
        """|coro|

        Get the channels in a guild.
        """
        data = await self.http.get_channels(get_id(guild_id))
        return [GuildChannel(state=self, data=channel_data) for channel_data in data]

    async def create_channel(
        self,
        guild_id: SnowflakeLike,
        *,
        name: str,
        type: ChannelType = MISSING,
        topic: str = MISSING,
        bitrate: int = MISSING,
        user_limit: int = MISSING,
        slowmode_delay: int = MISSING,
        position: int = MISSING,
        overwrites: Sequence[PermissionOverwrite] = MISSING,
        category: SnowflakeLike = MISSING,
        nsfw: bool = MISSING,
        reason: Optional[str] = None,
    ) -> GuildChannel:
        """|coro|

        Create a channel in a guild.

        Requires the ``MANAGE_CHANNELS`` permission.

        Parameters
        -----------
        name: :class:`str`
            The channel's name, 2-100 characters.
        type: :class:`ChannelType`
            The channel's type. Defaults to a text channel.
        topic: :class:`str`
            The channel's topic, 0-1024 characters. Text and news channels only.
        bitrate: :class:`int`
            The bitrate in bits. Voice channels only.
        user_limit: :class:`int`
            The user limit, 0 for none. Voice channels only.
        slowmode_delay: :class:`int`
            Seconds a user has to wait between messages, 0-21600. Text channels only.
        position: :class:`int`
            The sorting position.
        overwrites: List[:class:`PermissionOverwrite`]
            The channel's permission overwrites.
        category: Union[:class:`int`, :class:`~.abc.Snowflake`]
            The parent category.
        nsfw: :class:`bool`
            Whether the channel is NSFW.

        Returns
        --------
        :class:`.GuildChannel`
            The created channel.
        """
        if not 2 <= len(name) <= 100:
            raise InvalidArgument('name must be between 2 and 100 characters')

        payload: Dict[str, Any] = {
            'name': name,
        }
        if type is not MISSING:
            payload['type'] = int(type)
        if topic is not MISSING:
            payload['topic'] = topic
        if bitrate is not MISSING:
            payload['bitrate'] = bitrate
        if user_limit is not MISSING:
            payload['user_limit'] = user_limit
        if slowmode_delay is not MISSING:
            payload['rate_limit_per_user'] = slowmode_delay
        if position is not MISSING:
            payload['position'] = position
        if overwrites is not MISSING:
            payload['permission_overwrites'] = [overwrite.to_dict() for overwrite in overwrites]
        if category is not MISSING:
            payload['parent_id'] = str(get_id(category))
        if nsfw is not MISSING:
            payload['nsfw'] = nsfw

        data = await self.http.create_channel(get_id(guild_id), payload=payload, reason=reason)
        return GuildChannel(state=self, data=data)

    async def move_channels(
        self,
        guild_id: SnowflakeLike,
        positions: Union[Mapping[SnowflakeLike, Optional[int]], Iterable[Tuple[SnowflakeLike, Optional[int]]]],
        *,
        reason: Optional[str] = None,
    ) -> None:
        """|coro|

        Change the sorting positions of a set of channels in a guild.

        Requires the ``MANAGE_CHANNELS`` permission.

        Parameters
        -----------
        positions: Union[Mapping, Iterable[Tuple]]
            Channel to new position pairs. A position of ``None`` is sent as
            ``null``.
        """
        if isinstance(positions, Mapping):
            positions = positions.items()

        payload = [
            {
                'id': str(get_id(channel)),
                'position': position,
            }
            for channel, position in positions
        ]
        await self.http.move_channels(get_id(guild_id), payload=payload, reason=reason)

    async def channel(self, channel_id: SnowflakeLike, /) -> GuildChannel:
        """|coro|

        Fetch a channel by its ID.
        """
        data = await self.http.get_channel(get_id(channel_id))
        return GuildChannel(state=self, data=data)

    async def modify_channel(
        self,
        channel_id: SnowflakeLike,
        *,
        name: str = MISSING,
        type: ChannelType = MISSING,
        position: Optional[int] = MISSING,
        topic: Optional[str] = MISSING,
        nsfw: Optional[bool] = MISSING,
        slowmode_delay: Optional[int] = MISSING,
        bitrate: Optional[int] = MISSING,
        user_limit: Optional[int] = MISSING,
        overwrites: Sequence[PermissionOverwrite] = MISSING,
        category: Optional[SnowflakeLike] = MISSING,
        reason: Optional[str] = None,
    ) -> None:
        """|coro|

        Update a channel's settings. Only the given keyword arguments are
        sent; ``None`` resets a nullable setting.

        Requires the ``MANAGE_CHANNELS`` permission.

        Parameters
        -----------
        type: :class:`ChannelType`
            Only converting between :attr:`ChannelType.text` and
            :attr:`ChannelType.news` is supported.
        """
        payload: Dict[str, Any] = {}
        if name is not MISSING:
            if not 2 <= len(name) <= 100:
                raise InvalidArgument('name must be between 2 and 100 characters')
            payload['name'] = name
        if type is not MISSING:
            if type not in (ChannelType.text, ChannelType.news):
                raise InvalidArgument('type can only be changed between text and news')
            payload['type'] = int(type)
        if position is not MISSING:
            payload['position'] = position
        if topic is not MISSING:
            payload['topic'] = topic
        if nsfw is not MISSING:
            payload['nsfw'] = nsfw
        if slowmode_delay is not MISSING:
            payload['rate_limit_per_user'] = slowmode_delay
        if bitrate is not MISSING:
            payload['bitrate'] = bitrate
        if user_limit is not MISSING:
            payload['user_limit'] = user_limit
        if overwrites is not MISSING:
            payload['permission_overwrites'] = [overwrite.to_dict() for overwrite in overwrites]
        if category is not MISSING:
            payload['parent_id'] = str(get_id(category)) if category is not None else None

        await self.http.edit_channel(get_id(channel_id), payload=payload, reason=reason)

    async def delete_channel(self, channel_id: SnowflakeLike, *, reason: Optional[str] = None) -> None:
        """|coro|

        Delete a channel, or close a private message.

        Deleting a category does not delete its child channels; they are
        moved out of it instead.
        """
        await self.http.delete_channel(get_id(channel_id), reason=reason)

    async def edit_channel_permission(
        self,
        channel_id: SnowflakeLike,
        overwrite: PermissionOverwrite,
        *,
        reason: Optional[str] = None,
    ) -> None:
        """|coro|

        Create or replace the permission overwrite for a role or member in a
        guild channel.

        Requires the ``MANAGE_ROLES`` permission.
        """
        await self.http.edit_channel_permissions(
            get_id(channel_id),
            overwrite.id,
            payload=overwrite.to_dict(include_id=False),
            reason=reason,
        )

    async def delete_channel_permission(
        self,
        channel_id: SnowflakeLike,
        overwrite_id: SnowflakeLike,
        *,
        reason: Optional[str] = None,
    ) -> None:
        """|coro|

        Delete the permission overwrite for a role or member in a guild
        channel.

        Requires the ``MANAGE_ROLES`` permission.
        """
        await self.http.delete_channel_permissions(get_id(channel_id), get_id(overwrite_id), reason=reason)

    async def typing(self, channel_id: SnowflakeLike, /) -> None:
        """|coro|

        Post a typing indicator to a channel. Clients usually clear it after
        8-10 seconds or once a message is sent.
        """
        await self.http.send_typing(get_id(channel_id))

    # pins

    async def pinned_messages(self, channel_id: SnowflakeLike, /) -> List[Message]:
        """|coro|

        Get every pinned message in a channel.
        """
        data = await self.http.get_pins(get_id(channel_id))
        return [Message(state=self, data=message_data) for message_data in data]

    async def pin_message(self, channel_id: SnowflakeLike, message_id: SnowflakeLike, *, reason: Optional[str] = None) -> None:
        """|coro|

        Pin a message in a channel.

        Requires the ``MANAGE_MESSAGES`` permission.
        """
        await self.http.pin_message(get_id(channel_id), get_id(message_id), reason=reason)

    async def unpin_message(self, channel_id: SnowflakeLike, message_id: SnowflakeLike, *, reason: Optional[str] = None) -> None:
        """|coro|

        Unpin a message in a channel.

        Requires the ``MANAGE_MESSAGES`` permission.
        """
        await self.http.unpin_message(get_id(channel_id), get_id(message_id), reason=reason)

    # group DMs

    async def add_recipient(
        self,
        channel_id: SnowflakeLike,
        user_id: SnowflakeLike,
        *,
        access_token: str,
        nick: str,
    ) -> None:
        """|coro|

        Add a user to a group DM. ``access_token`` must be granted with the
        ``gdm.join`` scope, so this is only useful with OAuth2.
        """
        await self.http.add_group_recipient(get_id(channel_id), get_id(user_id), access_token=access_token, nick=nick)

    async def remove_recipient(self, channel_id: SnowflakeLike, user_id: SnowflakeLike) -> None:
        """|coro|

        Remove a user from a group DM.
        """
        await self.http.remove_group_recipient(get_id(channel_id), get_id(user_id))

    async def ack(
        self,
        channel_id: SnowflakeLike,
        message_id: SnowflakeLike,
        *,
        token: Optional[str] = None,
    ) -> Optional[str]:
        """|coro|

        Mark a channel as read up to a message. This endpoint is
        undocumented.

        Parameters
        -----------
        token: Optional[:class:`str`]
            The read state token returned by the previous call, if any.

        Returns
        --------
        Optional[:class:`str`]
            The new read state token to pass to the next call.
        """
        data = await self.http.ack_message(get_id(channel_id), get_id(message_id), token=token)
        if isinstance(data, dict):
            return data.get('token')
        return None
