from __future__ import annotations


class KeywardError(Exception):
    pass


class UnknownTypeError(KeywardError):
    """No key manager is registered for a key type identifier."""

    def __init__(self, type_id: str) -> None:
        super().__init__(f"no key manager registered for key type {type_id!r}")
        self.type_id = type_id


class AlreadyRegisteredError(KeywardError):
    pass


class FormatError(KeywardError):
    """Template format parameters were rejected by the key manager."""


class GenerationError(KeywardError):
    pass


class KeyMaterialError(KeywardError):
    """Stored key payload cannot be turned into a primitive (corruption or version mismatch)."""


class PrimitiveKindMismatchError(KeywardError):
    pass


class KeysetIntegrityError(KeywardError):
    pass


class DuplicatePrefixError(KeysetIntegrityError):
    pass


class PrimaryKeyUnavailable(KeysetIntegrityError):
    pass


class NoMatchingKeyError(KeywardError):
    """
    Raised once a verify/decrypt call has exhausted every candidate key.

    The message is fixed on purpose: it never says which key was tried or
    why it failed.
    """

    MESSAGE = "no key could process this input"

    def __init__(self) -> None:
        super().__init__(self.MESSAGE)


class KeysetError(KeywardError):
    """Invalid status transition or lookup requested by the keyset owner."""
