from __future__ import annotations

from typing import Any, Iterable, Mapping

from loguru import logger
from pydantic import TypeAdapter, ValidationError

from eioptions.errors import InvalidArgumentError, LockedMutationError
from eioptions.options_config import DEFAULT_CONFIG, ServerOptionsConfig

#: Allow every origin for CORS
ALLOWED_CORS_ORIGIN_ALL: None = None
#: Allow no origin for CORS
ALLOWED_CORS_ORIGIN_NONE: tuple[str, ...] = ()

_config_adapter = TypeAdapter(ServerOptionsConfig)


class ServerOptions:
    """Options of an engine.io server.

    An instance can be changed until `lock()` is called, after that every setter raises
    `LockedMutationError`. Locked instances are read-only and can be shared between
    connection handlers without synchronization.

    Don't construct it directly, use `ServerOptions.new_from_default()` to get an unlocked
    copy of `DEFAULT` or `ServerOptions.from_config()`.
    """

    def __init__(self) -> None:
        self._locked = False
        self._ping_interval = 0
        self._ping_timeout = 0
        self._allowed_cors_origins: tuple[str, ...] | None = ALLOWED_CORS_ORIGIN_ALL

    @classmethod
    def new_from_default(cls) -> ServerOptions:
        return (
            cls()
            .set_ping_interval(DEFAULT.get_ping_interval())
            .set_ping_timeout(DEFAULT.get_ping_timeout())
            .set_allowed_cors_origins(DEFAULT.get_allowed_cors_origins())
        )

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> ServerOptions:
        """Create unlocked options from config mapping, missing keys keep default values.

        Raises `InvalidArgumentError` with errors by field if config is not valid.
        """
        try:
            validated_config = _config_adapter.validate_python(config)
        except ValidationError as error:
            raise InvalidArgumentError(
                {
                    ".".join(str(part) for part in field_error["loc"]): field_error["msg"]
                    for field_error in error.errors()
                }
            ) from error

        logger.opt(lazy=True).trace(
            "Server options from config: {config}", config=lambda: dict(validated_config)
        )

        options = cls.new_from_default()
        if "ping_interval" in validated_config:
            options.set_ping_interval(validated_config["ping_interval"])
        if "ping_timeout" in validated_config:
            options.set_ping_timeout(validated_config["ping_timeout"])
        if "allowed_cors_origins" in validated_config:
            options.set_allowed_cors_origins(validated_config["allowed_cors_origins"])
        return options

    def to_config(self) -> ServerOptionsConfig:
        origins = self._allowed_cors_origins
        return {
            "ping_interval": self._ping_interval,
            "ping_timeout": self._ping_timeout,
            "allowed_cors_origins": list(origins) if origins is not None else None,
        }

    def get_ping_interval(self) -> int:
        """Ping interval in milliseconds."""
        return self._ping_interval

    def set_ping_interval(self, ping_interval: int) -> ServerOptions:
        if self._locked:
            raise LockedMutationError("Ping interval")
        _check_milliseconds("Ping interval", ping_interval)

        self._ping_interval = ping_interval
        return self

    def get_ping_timeout(self) -> int:
        """Ping timeout in milliseconds."""
        return self._ping_timeout

    def set_ping_timeout(self, ping_timeout: int) -> ServerOptions:
        if self._locked:
            raise LockedMutationError("Ping timeout")
        _check_milliseconds("Ping timeout", ping_timeout)

        self._ping_timeout = ping_timeout
        return self

    def get_allowed_cors_origins(self) -> tuple[str, ...] | None:
        """Allowed origins sorted ascending, `None` if all origins are allowed."""
        return self._allowed_cors_origins

    def set_allowed_cors_origins(self, allowed_cors_origins: Iterable[str] | None) -> ServerOptions:
        if self._locked:
            raise LockedMutationError("Allowed cors origins")

        if allowed_cors_origins is ALLOWED_CORS_ORIGIN_ALL:
            self._allowed_cors_origins = ALLOWED_CORS_ORIGIN_ALL
            return self

        if isinstance(allowed_cors_origins, str):
            raise TypeError(
                f"Expected collection of origins, got single string '{allowed_cors_origins}'"
            )
        # sorted once here, so that origin matching can bisect on every request
        self._allowed_cors_origins = tuple(sorted(allowed_cors_origins))
        return self

    def lock(self) -> None:
        if not self._locked:
            self._locked = True
            logger.debug("Server options locked: {!r}", self)

    @property
    def ping_interval(self) -> int:
        return self._ping_interval

    @property
    def ping_timeout(self) -> int:
        return self._ping_timeout

    @property
    def allowed_cors_origins(self) -> tuple[str, ...] | None:
        return self._allowed_cors_origins

    @property
    def locked(self) -> bool:
        return self._locked

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ServerOptions):
            return NotImplemented
        return (
            self._ping_interval == other._ping_interval
            and self._ping_timeout == other._ping_timeout
            and self._allowed_cors_origins == other._allowed_cors_origins
        )

    # unlocked instances are mutable
    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(ping_interval={self._ping_interval},"
            f" ping_timeout={self._ping_timeout},"
            f" allowed_cors_origins={self._allowed_cors_origins!r}, locked={self._locked})"
        )


def _check_milliseconds(option_name: str, value: Any) -> None:
    # bool is an int subclass, but never a valid duration
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(
            f"{option_name} must be integer milliseconds, got {type(value).__name__}"
        )


def _create_default() -> ServerOptions:
    options = ServerOptions()
    options.set_ping_timeout(DEFAULT_CONFIG["ping_timeout"])
    options.set_ping_interval(DEFAULT_CONFIG["ping_interval"])
    options.set_allowed_cors_origins(DEFAULT_CONFIG["allowed_cors_origins"])
    options.lock()
    return options


#: Default options used by server. Locked at import, so it is never seen partially configured.
DEFAULT = _create_default()


__all__ = [
    "ServerOptions",
    "DEFAULT",
    "ALLOWED_CORS_ORIGIN_ALL",
    "ALLOWED_CORS_ORIGIN_NONE",
]
