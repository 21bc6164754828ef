from __future__ import annotations

from bisect import bisect_left
from typing import Any, Mapping

import socketio
from loguru import logger

from eioptions.options import ALLOWED_CORS_ORIGIN_ALL, ServerOptions

_OPTION_KWARGS = ("ping_interval", "ping_timeout", "cors_allowed_origins")


class OriginMatcher:
    """Membership test over sorted origins, passed to engineio as `cors_allowed_origins`.

    Origins are compared literally, so neither `'*'` nor an empty collection has a special
    meaning here. No origins means every origin is rejected.
    """

    def __init__(self, sorted_origins: tuple[str, ...]) -> None:
        self.sorted_origins = sorted_origins

    def __call__(self, origin: str | None, environ: Mapping[str, Any] | None = None) -> bool:
        if origin is None:
            return False
        index = bisect_left(self.sorted_origins, origin)
        return index < len(self.sorted_origins) and self.sorted_origins[index] == origin

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.sorted_origins!r})"


def to_engineio_kwargs(options: ServerOptions) -> dict[str, Any]:
    allowed_origins = options.get_allowed_cors_origins()
    cors_allowed_origins: str | OriginMatcher
    if allowed_origins is ALLOWED_CORS_ORIGIN_ALL:
        cors_allowed_origins = "*"
    else:
        # engineio treats `[]` as disabled origin checks and `'*'` items as allow all,
        # a callable is the only form checked literally
        cors_allowed_origins = OriginMatcher(allowed_origins)

    # engineio expects seconds
    return {
        "ping_interval": options.get_ping_interval() / 1000,
        "ping_timeout": options.get_ping_timeout() / 1000,
        "cors_allowed_origins": cors_allowed_origins,
    }


def create_server(
    options: ServerOptions, async_mode: str = "aiohttp", **kwargs: Any
) -> socketio.AsyncServer:
    """Lock options and create socket.io server configured with them.

    Additional keyword arguments are passed to `socketio.AsyncServer`, but cannot override
    values taken from options.
    """
    overridden = [key for key in _OPTION_KWARGS if key in kwargs]
    if len(overridden) > 0:
        raise ValueError(
            f"Server arguments {', '.join(overridden)} are set by server options"
        )

    options.lock()
    server_kwargs = to_engineio_kwargs(options)
    server_kwargs.update(kwargs)
    sio = socketio.AsyncServer(async_mode=async_mode, **server_kwargs)
    logger.debug("Socket.io server created ({}): {!r}", async_mode, options)
    return sio


__all__ = ["OriginMatcher", "to_engineio_kwargs", "create_server"]
