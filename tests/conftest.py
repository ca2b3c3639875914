from __future__ import annotations

import json
from typing import Any, Callable, Dict, List, Optional

import pytest

import guildrest
from guildrest.http import Route


class FakeResponse:
    def __init__(self, status: int, body: Any = None, *, headers: Optional[Dict[str, str]] = None, reason: str = 'OK'):
        self.status = status
        self.reason = reason
        self.headers = dict(headers or {})
        if body is None:
            self._text = ''
        else:
            self._text = json.dumps(body)
            self.headers.setdefault('content-type', 'application/json')

    async def text(self, encoding: Optional[str] = None) -> str:
        return self._text


class FakeSession:
    """Stands in for aiohttp.ClientSession, recording every request."""

    def __init__(self, handler: Optional[Callable[[Dict[str, Any]], Any]] = None):
        self.closed = False
        self.calls: List[Dict[str, Any]] = []
        self.queue: List[Any] = []
        self.handler = handler or (lambda call: FakeResponse(204))

    async def request(self, method: str, url: str, **kwargs) -> FakeResponse:
        data = kwargs.get('data')
        call = {
            'method': method,
            'url': url,
            'path': url[len(Route.BASE):],
            'params': dict(kwargs.get('params') or {}),
            'headers': kwargs.get('headers') or {},
            'json': json.loads(data) if data else None,
        }
        self.calls.append(call)

        response = self.queue.pop(0) if self.queue else self.handler(call)
        if isinstance(response, BaseException):
            raise response
        return response

    async def close(self) -> None:
        self.closed = True


def user_payload(user_id: int, **extra) -> Dict[str, Any]:
    payload = {
        'id': str(user_id),
        'username': f'user{user_id}',
        'discriminator': '0001',
        'avatar': None,
    }
    payload.update(extra)
    return payload


def member_payload(user_id: int, **extra) -> Dict[str, Any]:
    payload = {
        'user': user_payload(user_id),
        'nick': None,
        'roles': ['41771983423143936'],
        'joined_at': '2020-05-01T12:30:00.123000+00:00',
        'deaf': False,
        'mute': False,
    }
    payload.update(extra)
    return payload


class FakeGuild:
    """Serves GET /guilds/{id}/members the way the API pages through members.

    ``fail_on`` makes the nth page request (1-based) respond with a 403.
    """

    def __init__(self, member_count: int, *, fail_on: Optional[int] = None):
        self.member_ids = list(range(1, member_count + 1))
        self.fail_on = fail_on
        self.page_requests: List[Dict[str, Any]] = []

    def __call__(self, call: Dict[str, Any]) -> FakeResponse:
        self.page_requests.append(call['params'])
        if self.fail_on is not None and len(self.page_requests) == self.fail_on:
            return FakeResponse(403, {'code': 50013, 'message': 'Missing Permissions'}, reason='Forbidden')

        after = int(call['params'].get('after', 0))
        # the API defaults to a single member
        limit = int(call['params'].get('limit', 1))
        page = [member_id for member_id in self.member_ids if member_id > after][:limit]
        return FakeResponse(200, [member_payload(member_id) for member_id in page])


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def client(session: FakeSession) -> guildrest.Client:
    return guildrest.Client('token', session=session)
