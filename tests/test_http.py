from __future__ import annotations

import asyncio
import errno
import logging

import pytest

import guildrest
from guildrest.http import HTTPClient, Route
from conftest import FakeResponse, FakeSession


@pytest.fixture
def sleeps(monkeypatch):
    delays = []
    real_sleep = asyncio.sleep

    async def fake_sleep(delay, *args, **kwargs):
        delays.append(delay)
        await real_sleep(0)

    monkeypatch.setattr('guildrest.http.asyncio.sleep', fake_sleep)
    return delays


class TestRoute:
    def test_url(self):
        route = Route('GET', '/channels/5')
        assert route.url == 'https://discord.com/api/v6/channels/5'

    def test_override_base(self):
        route = Route('GET', '/channels/5', override_base='http://localhost:8080/api')
        assert route.url == 'http://localhost:8080/api/channels/5'
        assert Route.BASE == 'https://discord.com/api/v6'


class TestRequest:
    @pytest.mark.asyncio
    async def test_headers(self, client, session):
        await client.typing(5)

        headers = session.calls[0]['headers']
        assert headers['Authorization'] == 'Bot token'
        assert headers['User-Agent'].startswith(f'guildrest/{guildrest.__version__} ')
        assert 'Content-Type' not in headers

    @pytest.mark.asyncio
    async def test_user_token(self, session):
        client = guildrest.Client('user-token', bot=False, session=session)

        await client.typing(5)

        assert session.calls[0]['headers']['Authorization'] == 'user-token'

    @pytest.mark.asyncio
    async def test_json_body_sets_content_type(self, client, session):
        await client.modify_member(1, 2, mute=False)

        assert session.calls[0]['headers']['Content-Type'] == 'application/json'

    @pytest.mark.asyncio
    async def test_base_url(self, session):
        client = guildrest.Client('token', base_url='http://localhost:8080/api', session=session)

        await client.typing(5)

        assert session.calls[0]['url'] == 'http://localhost:8080/api/channels/5/typing'

    @pytest.mark.asyncio
    async def test_non_json_response_is_text(self, session):
        http = HTTPClient('token', session=session)
        session.handler = lambda call: FakeResponse(200)

        assert await http.request(Route('GET', '/gateway')) == ''

    @pytest.mark.asyncio
    async def test_rate_limit_retry_after_header(self, client, session, sleeps):
        session.queue = [
            FakeResponse(429, {'message': 'You are being rate limited.', 'retry_after': 2500}, headers={'retry-after': '3'}),
            FakeResponse(200, {'pruned': 1}),
        ]

        assert await client.prune_count(1) == 1
        assert sleeps == [3.0]
        assert len(session.calls) == 2

    @pytest.mark.asyncio
    async def test_rate_limit_retry_after_body(self, client, session, sleeps):
        session.queue = [
            FakeResponse(429, {'message': 'You are being rate limited.', 'retry_after': 2500}),
            FakeResponse(200, {'pruned': 1}),
        ]

        await client.prune_count(1)

        assert sleeps == [2.5]

    @pytest.mark.asyncio
    async def test_rate_limit_is_logged(self, client, session, sleeps, caplog):
        session.queue = [
            FakeResponse(429, {'retry_after': 1000}),
            FakeResponse(204),
        ]

        with caplog.at_level(logging.WARNING, logger='guildrest.http'):
            await client.typing(5)

        assert 'Rate limited on /channels/5/typing' in caplog.text

    @pytest.mark.asyncio
    async def test_rate_limit_out_of_retries(self, session, sleeps):
        client = guildrest.Client('token', max_retries=3, session=session)
        session.handler = lambda call: FakeResponse(429, {'retry_after': 1000}, reason='Too Many Requests')

        with pytest.raises(guildrest.TooManyRequests):
            await client.typing(5)

        assert len(session.calls) == 3
        assert len(sleeps) == 2

    @pytest.mark.asyncio
    async def test_server_error_is_retried(self, client, session, sleeps):
        session.queue = [
            FakeResponse(502, reason='Bad Gateway'),
            FakeResponse(500, {'message': '500: Internal Server Error', 'code': 0}),
            FakeResponse(200, {'pruned': 4}),
        ]

        assert await client.prune_count(1) == 4
        assert sleeps == [1, 3]

    @pytest.mark.asyncio
    async def test_server_error_out_of_retries(self, session, sleeps):
        client = guildrest.Client('token', max_retries=2, session=session)
        session.handler = lambda call: FakeResponse(500, reason='Internal Server Error')

        with pytest.raises(guildrest.ServerError) as excinfo:
            await client.typing(5)

        assert excinfo.value.status == 500
        assert len(session.calls) == 2

    @pytest.mark.asyncio
    async def test_connection_reset_is_retried(self, client, session, sleeps):
        session.queue = [ConnectionResetError(errno.ECONNRESET, 'Connection reset by peer'), FakeResponse(204)]

        await client.typing(5)

        assert len(session.calls) == 2
        assert sleeps == [1]

    @pytest.mark.asyncio
    async def test_other_os_errors_propagate(self, client, session, sleeps):
        session.queue = [OSError(errno.EHOSTUNREACH, 'unreachable')]

        with pytest.raises(OSError):
            await client.typing(5)

        assert sleeps == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ('status', 'exc_type'),
        [
            (400, guildrest.BadRequest),
            (401, guildrest.Unauthorized),
            (403, guildrest.Forbidden),
            (404, guildrest.NotFound),
            (405, guildrest.HTTPException),
        ],
    )
    async def test_client_errors_are_not_retried(self, client, session, status, exc_type):
        session.handler = lambda call: FakeResponse(status, {'code': 50035, 'message': 'Invalid Form Body'})

        with pytest.raises(exc_type) as excinfo:
            await client.channel(5)

        assert type(excinfo.value) is exc_type
        assert excinfo.value.code == 50035
        assert 'Invalid Form Body' in str(excinfo.value)
        assert len(session.calls) == 1

    @pytest.mark.asyncio
    async def test_error_with_text_body(self, client, session):
        session.handler = lambda call: FakeResponse(403, reason='Forbidden')

        with pytest.raises(guildrest.Forbidden) as excinfo:
            await client.channel(5)

        assert excinfo.value.code == 0
        assert excinfo.value.text == ''

    @pytest.mark.asyncio
    async def test_token_is_not_logged(self, client, session, caplog):
        with caplog.at_level(logging.DEBUG, logger='guildrest.http'):
            await client.typing(5)

        assert 'Bot token' not in caplog.text
        assert '[removed]' in caplog.text


class TestLifecycle:
    def test_max_retries_must_be_positive(self):
        with pytest.raises(ValueError):
            HTTPClient('token', max_retries=0)

    @pytest.mark.asyncio
    async def test_given_session_is_left_open(self, client, session):
        async with client:
            await client.typing(5)

        assert client.closed is True
        assert session.closed is False

    @pytest.mark.asyncio
    async def test_own_session_is_closed(self):
        http = HTTPClient('token')
        http.session = FakeSession()

        await http.close()

        assert http.session.closed is True
