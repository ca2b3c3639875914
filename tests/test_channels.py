from __future__ import annotations

import pytest

import guildrest
from conftest import FakeResponse, user_payload


def channel_payload(channel_id: int = 41771983423143937, **extra):
    payload = {
        'id': str(channel_id),
        'type': 0,
        'guild_id': '1234',
        'name': 'general',
        'position': 6,
        'permission_overwrites': [
            {'id': '1234', 'type': 'role', 'allow': 0, 'deny': 2048},
        ],
        'rate_limit_per_user': 2,
        'nsfw': False,
        'topic': '24/7 chat about how to gank Mike #2',
        'last_message_id': '155117677105512449',
        'parent_id': '399942396007890945',
    }
    payload.update(extra)
    return payload


def message_payload(message_id: int, **extra):
    payload = {
        'id': str(message_id),
        'channel_id': '41771983423143937',
        'author': user_payload(80351110224678912),
        'content': 'Supa Hot',
        'timestamp': '2017-07-11T17:27:07.299000+00:00',
        'edited_timestamp': None,
        'pinned': True,
        'type': 0,
    }
    payload.update(extra)
    return payload


class TestGuildChannels:
    @pytest.mark.asyncio
    async def test_channels(self, client, session):
        session.handler = lambda call: FakeResponse(200, [
            channel_payload(),
            channel_payload(2, type=2, name='Voice', bitrate=64000, user_limit=0, permission_overwrites=[]),
        ])

        channels = await client.channels(1234)

        assert session.calls[0]['path'] == '/guilds/1234/channels'
        text, voice = channels
        assert text.type is guildrest.ChannelType.text
        assert text.slowmode_delay == 2
        assert text.category_id == 399942396007890945
        assert text.last_message_id == 155117677105512449
        assert text.overwrites == [guildrest.PermissionOverwrite(1234, guildrest.OverwriteType.role, deny=2048)]
        assert voice.type is guildrest.ChannelType.voice
        assert voice.bitrate == 64000

    @pytest.mark.asyncio
    async def test_create_channel(self, client, session):
        session.handler = lambda call: FakeResponse(201, channel_payload(99, name='voice-lobby', type=2))
        overwrite = guildrest.PermissionOverwrite(guildrest.Object(55), guildrest.OverwriteType.member, allow=1024)

        channel = await client.create_channel(
            1234,
            name='voice-lobby',
            type=guildrest.ChannelType.voice,
            user_limit=10,
            overwrites=[overwrite],
            category=399942396007890945,
            reason='events',
        )

        call = session.calls[0]
        assert call['method'] == 'POST'
        assert call['path'] == '/guilds/1234/channels'
        assert call['json'] == {
            'name': 'voice-lobby',
            'type': 2,
            'user_limit': 10,
            'permission_overwrites': [{'id': '55', 'type': 'member', 'allow': 1024, 'deny': 0}],
            'parent_id': '399942396007890945',
        }
        assert call['headers']['X-Audit-Log-Reason'] == 'events'
        assert channel.id == 99

    @pytest.mark.asyncio
    async def test_create_channel_name_length(self, client, session):
        with pytest.raises(guildrest.InvalidArgument):
            await client.create_channel(1234, name='a')
        assert session.calls == []

    @pytest.mark.asyncio
    async def test_move_channels(self, client, session):
        await client.move_channels(1234, {guildrest.Object(1): 0, 2: None})

        call = session.calls[0]
        assert call['method'] == 'PATCH'
        assert call['path'] == '/guilds/1234/channels'
        assert call['json'] == [{'id': '1', 'position': 0}, {'id': '2', 'position': None}]

    @pytest.mark.asyncio
    async def test_move_channels_from_pairs(self, client, session):
        await client.move_channels(1234, [(3, 1), (4, 2)])

        assert session.calls[0]['json'] == [{'id': '3', 'position': 1}, {'id': '4', 'position': 2}]


class TestChannel:
    @pytest.mark.asyncio
    async def test_channel(self, client, session):
        session.handler = lambda call: FakeResponse(200, channel_payload())

        channel = await client.channel(41771983423143937)

        assert session.calls[0]['path'] == '/channels/41771983423143937'
        assert channel.name == 'general'
        assert channel.guild_id == 1234
        assert channel.mention == '<#41771983423143937>'

    @pytest.mark.asyncio
    async def test_modify_channel(self, client, session):
        await client.modify_channel(5, name='rules', topic=None, category=None, slowmode_delay=30)

        call = session.calls[0]
        assert call['method'] == 'PATCH'
        assert call['path'] == '/channels/5'
        assert call['json'] == {'name': 'rules', 'topic': None, 'rate_limit_per_user': 30, 'parent_id': None}

    @pytest.mark.asyncio
    async def test_modify_channel_type_conversion(self, client, session):
        await client.modify_channel(5, type=guildrest.ChannelType.news)
        assert session.calls[0]['json'] == {'type': 5}

        with pytest.raises(guildrest.InvalidArgument):
            await client.modify_channel(5, type=guildrest.ChannelType.voice)
        assert len(session.calls) == 1

    @pytest.mark.asyncio
    async def test_delete_channel(self, client, session):
        channel = guildrest.GuildChannel(state=client, data=channel_payload(7))

        await channel.delete()

        assert session.calls[0]['method'] == 'DELETE'
        assert session.calls[0]['path'] == '/channels/7'

    @pytest.mark.asyncio
    async def test_edit_channel_permission_omits_id_from_body(self, client, session):
        overwrite = guildrest.PermissionOverwrite(55, guildrest.OverwriteType.member, allow=1024, deny=2048)

        await client.edit_channel_permission(5, overwrite)

        call = session.calls[0]
        assert call['method'] == 'PUT'
        assert call['path'] == '/channels/5/permissions/55'
        assert call['json'] == {'type': 'member', 'allow': 1024, 'deny': 2048}

    @pytest.mark.asyncio
    async def test_delete_channel_permission(self, client, session):
        await client.delete_channel_permission(5, guildrest.Object(55))

        assert session.calls[0]['method'] == 'DELETE'
        assert session.calls[0]['path'] == '/channels/5/permissions/55'

    @pytest.mark.asyncio
    async def test_typing(self, client, session):
        await client.typing(5)

        assert session.calls[0]['method'] == 'POST'
        assert session.calls[0]['path'] == '/channels/5/typing'


class TestPins:
    @pytest.mark.asyncio
    async def test_pinned_messages(self, client, session):
        session.handler = lambda call: FakeResponse(200, [message_payload(1), message_payload(2)])

        pins = await client.pinned_messages(41771983423143937)

        assert session.calls[0]['path'] == '/channels/41771983423143937/pins'
        assert [message.id for message in pins] == [1, 2]
        assert pins[0].author.id == 80351110224678912
        assert pins[0].pinned is True
        assert pins[0].edited_at is None

    @pytest.mark.asyncio
    async def test_pin_and_unpin(self, client, session):
        await client.pin_message(5, 6)
        await client.unpin_message(5, 6)

        assert [(call['method'], call['path']) for call in session.calls] == [
            ('PUT', '/channels/5/pins/6'),
            ('DELETE', '/channels/5/pins/6'),
        ]

    @pytest.mark.asyncio
    async def test_message_unpin(self, client, session):
        message = guildrest.Message(state=client, data=message_payload(6))

        await message.unpin()

        assert message.pinned is False
        assert session.calls[0]['path'] == '/channels/41771983423143937/pins/6'


class TestRecipients:
    @pytest.mark.asyncio
    async def test_add_recipient(self, client, session):
        await client.add_recipient(5, 55, access_token='oauth', nick='pal')

        call = session.calls[0]
        assert call['method'] == 'PUT'
        assert call['path'] == '/channels/5/recipients/55'
        assert call['json'] == {'access_token': 'oauth', 'nickname': 'pal'}

    @pytest.mark.asyncio
    async def test_remove_recipient(self, client, session):
        await client.remove_recipient(5, 55)

        assert session.calls[0]['method'] == 'DELETE'
        assert session.calls[0]['path'] == '/channels/5/recipients/55'

    @pytest.mark.asyncio
    async def test_ack(self, client, session):
        session.handler = lambda call: FakeResponse(200, {'token': 'next'})

        token = await client.ack(5, 6, token='previous')

        call = session.calls[0]
        assert call['method'] == 'POST'
        assert call['path'] == '/channels/5/messages/6/ack'
        assert call['json'] == {'token': 'previous'}
        assert token == 'next'
