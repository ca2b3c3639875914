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

from typing import TYPE_CHECKING, Any, Dict, Optional, Union

if TYPE_CHECKING:
    import aiohttp

__all__ = (
    'GuildRESTException',
    'ClientException',
    'HTTPException',
    'BadRequest',
    'Unauthorized',
    'Forbidden',
    'NotFound',
    'TooManyRequests',
    'ServerError',
    'InvalidData',
    'InvalidArgument',
)


class GuildRESTException(Exception):
    """Base class for all guildrest exceptions."""
    pass


class ClientException(GuildRESTException):
    """Thrown when an operation in the :class:`Client` fails."""
    pass


class HTTPException(GuildRESTException):
    """A non-ok response was returned whilst performing an HTTP request.

    Attributes
    -----------
    response: :class:`aiohttp.ClientResponse`
        The :class:`aiohttp.ClientResponse` of the failed request.
    status: :class:`int`
        The HTTP status code of the request.
    code: :class:`int`
        The platform-specific error code. ``0`` if the response did not
        include one.
    text: :class:`str`
        The message that came with the error.
    """
    def __init__(self, response: aiohttp.ClientResponse, data: Optional[Union[Dict[str, Any], str]]):
        self.response = response
        self.status: int = response.status
        if isinstance(data, dict):
            self.code: int = data.get('code', 0)
            self.text: str = data.get('message', '')
            errors = data.get('errors')
            if errors:
                self.text = f'{self.text}\n{errors}' if self.text else str(errors)
        else:
            self.code = 0
            self.text = data or ''

        fmt = '{0} {1} (error code: {2})'
        if self.text:
            fmt += ': {3}'

        super().__init__(fmt.format(self.status, getattr(response, 'reason', ''), self.code, self.text))


class BadRequest(HTTPException):
    """Thrown on status code 400"""
    pass


class Unauthorized(HTTPException):
    """Thrown on status code 401"""
    pass


class Forbidden(HTTPException):
    """Thrown on status code 403"""
    pass


class NotFound(HTTPException):
    """Thrown on status code 404"""
    pass


class TooManyRequests(HTTPException):
    """Thrown on status code 429 once every retry has been used up"""
    pass


class ServerError(HTTPException):
    """Thrown on status code 500 or above"""
    pass


class InvalidData(ClientException):
    """Exception that's raised when the library encounters unknown or invalid
    data from the API.
    """
    pass


class InvalidArgument(ClientException):
    """Thrown when an argument to a function is invalid some way (e.g. wrong
    value or wrong type).

    This could be considered the analogous of ``ValueError`` and
    ``TypeError`` except inherited from :exc:`ClientException` and thus
    :exc:`GuildRESTException`.
    """
    pass
