from pydantic import ConfigDict, with_config
from typing_extensions import NotRequired, TypedDict


@with_config(ConfigDict(extra="forbid"))
class ServerOptionsConfig(TypedDict):
    # both in milliseconds
    ping_interval: NotRequired[int]
    ping_timeout: NotRequired[int]
    # None allows every origin, an empty list allows none
    allowed_cors_origins: NotRequired[list[str] | None]


DEFAULT_CONFIG: ServerOptionsConfig = {
    "ping_interval": 25000,
    "ping_timeout": 5000,
    "allowed_cors_origins": None,
}
