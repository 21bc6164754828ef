from typing import Dict


class LockedMutationError(RuntimeError):
    """Raised when an option is set on a locked options instance.

    Locking is irreversible, so this always points to a configuration sequence
    that mutates after handing the instance over. Set everything first, then lock.
    """

    def __init__(self, option_name: str):
        self.option_name = option_name
        super().__init__(f"{option_name} cannot be set. Instance is locked.")


class InvalidArgumentError(Exception):
    def __init__(self, errors_by_fields: Dict[str, str]):
        self.errors_by_fields = errors_by_fields
        super().__init__(errors_by_fields)
