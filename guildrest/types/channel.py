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
from typing import List, Literal, Optional, TypedDict
from typing_extensions import NotRequired

from .snowflake import Snowflake

ChannelTypeValue = Literal[0, 1, 2, 3, 4, 5, 6]
OverwriteTypeValue = Literal['role', 'member']


class PermissionOverwrite(TypedDict):
    id: Snowflake
    type: OverwriteTypeValue
    allow: int
    deny: int


class Channel(TypedDict):
    id: Snowflake
    type: ChannelTypeValue
    guild_id: NotRequired[Snowflake]
    position: NotRequired[int]
    permission_overwrites: NotRequired[List[PermissionOverwrite]]
    name: NotRequired[str]
    topic: NotRequired[Optional[str]]
    nsfw: NotRequired[bool]
    last_message_id: NotRequired[Optional[Snowflake]]
    bitrate: NotRequired[int]
    user_limit: NotRequired[int]
    rate_limit_per_user: NotRequired[int]
    parent_id: NotRequired[Optional[Snowflake]]


class ChannelPosition(TypedDict):
    id: Snowflake
    position: Optional[int]


class Ack(TypedDict):
    token: Optional[str]
