"""Error taxonomy surfaced by the user identity registry."""

from typing import Optional


class RegistryError(Exception):
    """Base class for every error raised by the registry."""


class InvalidInput(RegistryError, ValueError):
    """The caller supplied a value the registry cannot store."""


class DuplicateIdentity(RegistryError):
    """A uniqueness constraint on the users table was violated."""

    def __init__(self, message: str, external_id: Optional[str], display_name: str):
        super().__init__(message)
        self.external_id = external_id
        self.display_name = display_name


class DuplicateExternalId(DuplicateIdentity):
    def __init__(self, external_id: str, display_name: str):
        super().__init__(
            f"External id '{external_id}' is already registered",
            external_id,
            display_name,
        )


class DuplicateIdentityPair(DuplicateIdentity):
    def __init__(self, external_id: Optional[str], display_name: str):
        super().__init__(
            f"Identity ('{external_id}', '{display_name}') is already registered",
            external_id,
            display_name,
        )


class NotFound(RegistryError, LookupError):
    """No record matched the lookup."""


class StorageUnavailable(RegistryError):
    """The backing store could not be reached; safe to retry with backoff."""
