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
import sys

import aiohttp
import asyncio
from collections.abc import Iterable
import json
import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Union

from . import __version__
from .errors import (
    BadRequest,
    Forbidden,
    HTTPException,
    NotFound,
    ServerError,
    TooManyRequests,
    Unauthorized,
)

if TYPE_CHECKING:
    from typing_extensions import Self
    from types import TracebackType

    from .types.channel import Ack, ChannelPosition

log = logging.getLogger(__name__)

__all__ = (
    'HTTPClient',
    'Route',
)

MEMBERS_PAGE_LIMIT = 1000


async def json_or_text(response: aiohttp.ClientResponse) -> Union[Dict[str, Any], List[Any], str]:
    text = await response.text(encoding='utf-8')
    try:
        if response.headers['content-type'].startswith('application/json'):
            return json.loads(text)
    except KeyError:
        # No content-type on 204s
        pass

    return text


class Route:
    BASE = 'https://discord.com/api/v6'

    def __init__(self, method: str, path: str, *, override_base: Optional[str] = None):
        self.method = method
        self.path = path

        if override_base is not None:
            self.BASE = override_base

        self.url = self.BASE + path

    def __repr__(self) -> str:
        return f'<Route {self.method} {self.path}>'


class HTTPClient:
    """Performs requests against the REST API on behalf of a :class:`Client`.

    Every endpoint method returns the coroutine of :meth:`request`, which
    resolves to the decoded JSON response.
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
        if max_retries < 1:
            raise ValueError('max_retries must be at least 1')

        self.token: Optional[str] = token
        self.bot: bool = bot
        self.base_url: Optional[str] = base_url
        self.max_retries: int = max_retries

        self.session: Optional[aiohttp.ClientSession] = session
        self._owns_session: bool = session is None

        user_agent = 'guildrest/{0} Python/{1[0]}.{1[1]} aiohttp/{2}'
        self.user_agent: str = user_agent.format(__version__, sys.version_info, aiohttp.__version__)

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type],
        exc: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        await self.close()

    async def close(self) -> None:
        if self.session and self._owns_session:
            await self.session.close()

    def _route(self, method: str, path: str) -> Route:
        return Route(method, path, override_base=self.base_url)

    @property
    def _authorization(self) -> Optional[str]:
        if not self.token:
            return None
        return f'Bot {self.token}' if self.bot else self.token

    async def request(self, route: Route, *, reason: Optional[str] = None, **kwargs):
        url = route.url
        method = route.method

        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession()
            self._owns_session = True

        # create headers
        headers: Dict[str, str] = {
            'User-Agent': self.user_agent,
        }

        authorization = self._authorization
        if authorization:
            headers['Authorization'] = authorization

        if reason:
            headers['X-Audit-Log-Reason'] = reason

        if 'json' in kwargs:
            headers['Content-Type'] = 'application/json'
            kwargs['data'] = json.dumps(kwargs.pop('json'))

        kwargs['headers'] = headers

        # route.url doesn't include params since we don't pass them to the Route
        log_url = url
        if kwargs.get('params'):
            if isinstance(kwargs['params'], dict):
                log_url += '?' + '&'.join([f'{key}={val}' for key, val in kwargs['params'].items()])
            elif isinstance(kwargs['params'], Iterable):
                log_url += '?' + '&'.join([f'{param[0]}={param[1]}' for param in kwargs['params']])

        log_headers = headers.copy()
        if 'Authorization' in log_headers:
            log_headers['Authorization'] = '[removed]'

        response: Optional[aiohttp.ClientResponse] = None
        data: Optional[Union[Dict[str, Any], List[Any], str]] = None
        for tries in range(self.max_retries):
            last_try = tries == self.max_retries - 1
            try:
                response = await self.session.request(method, url, **kwargs)
            except OSError as exc:
                # Connection reset by peer
                if not last_try and (isinstance(exc, ConnectionResetError) or exc.errno in (54, 10054)):
                    await asyncio.sleep(1 + tries * 2)
                    continue
                raise

            log.debug('%s %s with data %s, headers %s, has returned %s', method, log_url, kwargs.get('data'), log_headers, response.status)

            data = await json_or_text(response)
            log.debug('%s %s has received %s', method, url, data)

            # The request was successful so just return the text/json
            if 300 > response.status >= 200:
                return data

            if response.status == 429:
                if last_try:
                    break

                retry_after = response.headers.get('retry-after')
                if retry_after is not None:
                    retry_after = float(retry_after)
                elif isinstance(data, dict) and 'retry_after' in data:
                    # the JSON body reports milliseconds
                    retry_after = data['retry_after'] / 1000
                else:
                    retry_after = 1 + tries * 2

                log.warning(
                    'Rate limited on %s. Retrying in %s seconds',
                    route.path,
                    retry_after,
                )
                await asyncio.sleep(retry_after)
                log.debug('Done sleeping for the rate limit. Retrying...')

                continue

            # We've received a 500, 502 or 504, unconditional retry
            if response.status in {500, 502, 504} and not last_try:
                await asyncio.sleep(1 + tries * 2)
                continue

            if response.status == 400:
                raise BadRequest(response, data)
            elif response.status == 401:
                raise Unauthorized(response, data)
            elif response.status == 403:
                raise Forbidden(response, data)
            elif response.status == 404:
                raise NotFound(response, data)
            elif response.status >= 500:
                raise ServerError(response, data)
            else:
                raise HTTPException(response, data)

        if response is not None:
            # We've run out of retries
            if response.status == 429:
                raise TooManyRequests(response, data)
            if response.status >= 500:
                raise ServerError(response, data)

            raise HTTPException(response, data)

        raise RuntimeError('Unreachable code in HTTP handling')

    # /guilds/{guild_id}/members

    def get_member(self, guild_id: int, user_id: int):
        return self.request(self._route('GET', f'/guilds/{guild_id}/members/{user_id}'))

    def get_members(self, guild_id: int, *, limit: int = 0, after: int = 0):
        # 0 leaves the page size to the server
        if limit > MEMBERS_PAGE_LIMIT:
            limit = MEMBERS_PAGE_LIMIT

        params = {}
        if after:
            params['after'] = after
        if limit:
            params['limit'] = limit

        return self.request(self._route('GET', f'/guilds/{guild_id}/members'), params=params)

    def add_member(self, guild_id: int, user_id: int, *, payload: Dict[str, Any]):
        return self.request(self._route('PUT', f'/guilds/{guild_id}/members/{user_id}'), json=payload)

    def edit_member(self, guild_id: int, user_id: int, *, payload: Dict[str, Any], reason: Optional[str] = None):
        return self.request(self._route('PATCH', f'/guilds/{guild_id}/members/{user_id}'), json=payload, reason=reason)

    def kick_member(self, guild_id: int, user_id: int, *, reason: Optional[str] = None):
        return self.request(self._route('DELETE', f'/guilds/{guild_id}/members/{user_id}'), reason=reason)

    # /guilds/{guild_id}/prune

    def get_prune_count(self, guild_id: int, *, days: int):
        params = {
            'days': days,
        }
        return self.request(self._route('GET', f'/guilds/{guild_id}/prune'), params=params)

    def prune_members(self, guild_id: int, *, days: int, compute_prune_count: bool, reason: Optional[str] = None):
        params = {
            'days': days,
            'compute_prune_count': str(compute_prune_count).lower(),
        }
        return self.request(self._route('POST', f'/guilds/{guild_id}/prune'), params=params, reason=reason)

    # /guilds/{guild_id}/bans

    def get_bans(self, guild_id: int):
        return self.request(self._route('GET', f'/guilds/{guild_id}/bans'))

    def get_ban(self, guild_id: int, user_id: int):
        return self.request(self._route('GET', f'/guilds/{guild_id}/bans/{user_id}'))

    def ban(
        self,
        guild_id: int,
        user_id: int,
        *,
        delete_message_days: Optional[int] = None,
        reason: Optional[str] = None,
    ):
        params = {}
        if delete_message_days is not None:
            params['delete_message_days'] = delete_message_days
        if reason is not None:
            params['reason'] = reason

        return self.request(self._route('PUT', f'/guilds/{guild_id}/bans/{user_id}'), params=params)

    def unban(self, guild_id: int, user_id: int, *, reason: Optional[str] = None):
        return self.request(self._route('DELETE', f'/guilds/{guild_id}/bans/{user_id}'), reason=reason)

    # /guilds/{guild_id}/channels

    def get_channels(self, guild_id: int):
        return self.request(self._route('GET', f'/guilds/{guild_id}/channels'))

    def create_channel(self, guild_id: int, *, payload: Dict[str, Any], reason: Optional[str] = None):
        return self.request(self._route('POST', f'/guilds/{guild_id}/channels'), json=payload, reason=reason)

    def move_channels(self, guild_id: int, *, payload: List[ChannelPosition], reason: Optional[str] = None):
        return self.request(self._route('PATCH', f'/guilds/{guild_id}/channels'), json=payload, reason=reason)

    # /channels

    def get_channel(self, channel_id: int):
        return self.request(self._route('GET', f'/channels/{channel_id}'))

    def edit_channel(self, channel_id: int, *, payload: Dict[str, Any], reason: Optional[str] = None):
        return self.request(self._route('PATCH', f'/channels/{channel_id}'), json=payload, reason=reason)

    def delete_channel(self, channel_id: int, *, reason: Optional[str] = None):
        return self.request(self._route('DELETE', f'/channels/{channel_id}'), reason=reason)

    def edit_channel_permissions(
        self,
        channel_id: int,
        overwrite_id: int,
        *,
        payload: Dict[str, Any],
        reason: Optional[str] = None,
    ):
        return self.request(self._route('PUT', f'/channels/{channel_id}/permissions/{overwrite_id}'), json=payload, reason=reason)

    def delete_channel_permissions(self, channel_id: int, overwrite_id: int, *, reason: Optional[str] = None):
        return self.request(self._route('DELETE', f'/channels/{channel_id}/permissions/{overwrite_id}'), reason=reason)

    def send_typing(self, channel_id: int):
        return self.request(self._route('POST', f'/channels/{channel_id}/typing'))

    def get_pins(self, channel_id: int):
        return self.request(self._route('GET', f'/channels/{channel_id}/pins'))

    def pin_message(self, channel_id: int, message_id: int, *, reason: Optional[str] = None):
        return self.request(self._route('PUT', f'/channels/{channel_id}/pins/{message_id}'), reason=reason)

    def unpin_message(self, channel_id: int, message_id: int, *, reason: Optional[str] = None):
        return self.request(self._route('DELETE', f'/channels/{channel_id}/pins/{message_id}'), reason=reason)

    def add_group_recipient(self, channel_id: int, user_id: int, *, access_token: str, nick: str):
        payload = {
            'access_token': access_token,
            'nickname': nick,
        }
        return self.request(self._route('PUT', f'/channels/{channel_id}/recipients/{user_id}'), json=payload)

    def remove_group_recipient(self, channel_id: int, user_id: int):
        return self.request(self._route('DELETE', f'/channels/{channel_id}/recipients/{user_id}'))

    def ack_message(self, channel_id: int, message_id: int, *, token: Optional[str] = None):
        payload: Ack = {
            'token': token,
        }
        return self.request(self._route('POST', f'/channels/{channel_id}/messages/{message_id}/ack'), json=payload)
