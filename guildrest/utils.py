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
from typing import Any, Optional, Union

from .errors import InvalidArgument


__all__ = (
    'MISSING',
    'Object',
    'get_id',
    'parse_time',
    'snowflake_time',
    'time_snowflake',
)


PLATFORM_EPOCH = 1420070400000


class _MissingSentinel:
    def __eq__(self, _) -> bool:
        return False

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return '...'

MISSING: Any = _MissingSentinel()


def parse_time(timestamp: Optional[str]) -> Optional[datetime.datetime]:
    if timestamp is None:
        return None

    # Python < 3.11 rejects the trailing Z
    if timestamp.endswith('Z'):
        timestamp = timestamp[:-1] + '+00:00'

    try:
        return datetime.datetime.fromisoformat(timestamp)
    except ValueError:
        raise TypeError(f'{timestamp} is not a valid ISO8601 datetime.') from None


def snowflake_time(id: int) -> datetime.datetime:
    """Returns the creation time of the given snowflake.

    Parameters
    -----------
    id: :class:`int`
        The snowflake ID.

    Returns
    --------
    :class:`datetime.datetime`
        An aware datetime in UTC representing the creation time of the snowflake.
    """
    timestamp = ((id >> 22) + PLATFORM_EPOCH) / 1000
    return datetime.datetime.fromtimestamp(timestamp, tz=datetime.timezone.utc)


def time_snowflake(dt: datetime.datetime, *, high: bool = False) -> int:
    """Returns a numeric snowflake pretending to be created at the given date.

    When using as the lower end of a range, use ``time_snowflake(dt, high=False) - 1``
    to be inclusive, ``high=True`` to be exclusive.

    Parameters
    -----------
    dt: :class:`datetime.datetime`
        A datetime object to convert to a snowflake.
        If naive, the timezone is assumed to be local time.
    high: :class:`bool`
        Whether or not to set the lower 22 bits to high or low.
    """
    timestamp = int(dt.timestamp() * 1000 - PLATFORM_EPOCH)
    return (timestamp << 22) + (2 ** 22 - 1 if high else 0)


def get_id(obj: Union[int, str, Any]) -> int:
    """Resolve a snowflake from an ``int``, a numeric ``str`` or anything with
    an ``id`` attribute."""
    value = getattr(obj, 'id', obj)
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidArgument(f'{obj!r} is not a valid snowflake') from None


class Object:
    """Represents a generic object identified only by its snowflake.

    This is useful for passing an ID where the library expects a model,
    such as the ``after`` cursor of :meth:`Client.fetch_members`.

    .. container:: operations

        .. describe:: x == y

            Checks if two objects are equal.

        .. describe:: x != y

            Checks if two objects are not equal.

        .. describe:: hash(x)

            Returns the object's hash.

    Attributes
    -----------
    id: :class:`int`
        The ID of the object.
    """

    def __init__(self, id: Union[int, str]):
        try:
            id = int(id)
        except (TypeError, ValueError):
            raise TypeError(f'id must be an int or numeric str, not {id.__class__.__name__}') from None

        self.id: int = id

    def __repr__(self) -> str:
        return f'<Object id={self.id!r}>'

    def __eq__(self, other) -> bool:
        return hasattr(other, 'id') and self.id == other.id

    def __hash__(self) -> int:
        return self.id >> 22

    @property
    def created_at(self) -> datetime.datetime:
        """:class:`datetime.datetime`: When the object was created, derived from its ID."""
        return snowflake_time(self.id)
