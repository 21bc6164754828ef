from .errors import InvalidArgumentError, LockedMutationError
from .options import ALLOWED_CORS_ORIGIN_ALL, ALLOWED_CORS_ORIGIN_NONE, DEFAULT, ServerOptions
from .options_config import DEFAULT_CONFIG, ServerOptionsConfig

__all__ = [
    "ServerOptions",
    "ServerOptionsConfig",
    "DEFAULT",
    "DEFAULT_CONFIG",
    "ALLOWED_CORS_ORIGIN_ALL",
    "ALLOWED_CORS_ORIGIN_NONE",
    "LockedMutationError",
    "InvalidArgumentError",
]
