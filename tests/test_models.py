from __future__ import annotations

import datetime

import pytest

import guildrest
from guildrest.enums import try_enum
from guildrest.utils import MISSING, get_id, parse_time, snowflake_time, time_snowflake
from conftest import member_payload, user_payload


class TestSnowflakes:
    def test_snowflake_time(self):
        created = snowflake_time(175928847299117063)

        assert created == datetime.datetime(2016, 4, 30, 11, 18, 25, 796000, tzinfo=datetime.timezone.utc)

    def test_time_snowflake_bounds(self):
        dt = datetime.datetime(2016, 4, 30, 11, 18, 25, tzinfo=datetime.timezone.utc)

        low = time_snowflake(dt)
        high = time_snowflake(dt, high=True)

        assert low >> 22 == 1462015105000 - 1420070400000
        assert high - low == 2 ** 22 - 1
        assert snowflake_time(low) == dt

    def test_object(self):
        obj = guildrest.Object('175928847299117063')

        assert obj.id == 175928847299117063
        assert obj == guildrest.Object(175928847299117063)
        assert hash(obj) == 175928847299117063 >> 22
        assert obj.created_at.year == 2016

    def test_object_rejects_non_numeric(self):
        with pytest.raises(TypeError):
            guildrest.Object('general')

    @pytest.mark.parametrize('value', [55, '55', guildrest.Object(55)])
    def test_get_id(self, value):
        assert get_id(value) == 55

    def test_get_id_invalid(self):
        with pytest.raises(guildrest.InvalidArgument):
            get_id('general')

    def test_missing_is_falsy(self):
        assert not MISSING
        assert MISSING != MISSING


class TestParseTime:
    def test_zulu_suffix(self):
        assert parse_time('2020-05-01T12:30:00Z') == datetime.datetime(2020, 5, 1, 12, 30, tzinfo=datetime.timezone.utc)

    def test_none(self):
        assert parse_time(None) is None

    def test_invalid(self):
        with pytest.raises(TypeError):
            parse_time('yesterday')


class TestPermissionOverwrite:
    def test_shared_bits(self):
        with pytest.raises(guildrest.InvalidArgument):
            guildrest.PermissionOverwrite(1, allow=1024, deny=1024 | 2048)

    def test_wrong_type(self):
        with pytest.raises(guildrest.InvalidArgument):
            guildrest.PermissionOverwrite(1, 'role')

    def test_from_dict(self):
        overwrite = guildrest.PermissionOverwrite.from_dict({'id': '9', 'type': 'member', 'allow': '1024', 'deny': 0})

        assert overwrite.id == 9
        assert overwrite.type is guildrest.OverwriteType.member
        assert overwrite.allow == 1024
        assert overwrite.to_dict() == {'id': '9', 'type': 'member', 'allow': 1024, 'deny': 0}


class TestEnums:
    def test_known_value(self):
        assert try_enum(guildrest.ChannelType, 4) is guildrest.ChannelType.category

    def test_unknown_value_is_kept(self):
        assert try_enum(guildrest.ChannelType, 13) == 13


class TestUsers:
    def test_user(self, client):
        user = guildrest.User(state=client, data=user_payload(80351110224678912, bot=True))

        assert user.name == 'user80351110224678912'
        assert str(user) == 'user80351110224678912#0001'
        assert user.mention == '<@80351110224678912>'
        assert user.bot is True
        assert user.system is False

    def test_member_without_nick(self, client):
        member = guildrest.Member(state=client, data=member_payload(5), guild_id=1234)

        assert member.display_name == 'user5'
        assert member.premium_since is None
        assert member == guildrest.Member(state=client, data=member_payload(5, nick='other'), guild_id=1234)
        assert member != member.user

    def test_ban_equality(self, client):
        first = guildrest.Ban(state=client, data={'reason': 'spam', 'user': user_payload(9)}, guild_id=1)
        second = guildrest.Ban(state=client, data={'reason': None, 'user': user_payload(9)}, guild_id=1)

        assert first == second
