class VaultError(Exception):
    """Base class for every failure raised by the vault core."""


class CryptoUnavailable(VaultError):
    """The host cryptographic provider is missing or blocked."""


class AuthenticationFailed(VaultError):
    """A presented password or hash did not satisfy an access gate."""


class ArtifactLocked(AuthenticationFailed):
    """The artifact has not been unlocked in the current session."""


class VaultLocked(VaultError):
    """The credential vault needs a session master password first."""


class CorruptOrWrongKey(VaultError):
    """AEAD authentication failed or the encrypted input is malformed."""


class NotFound(VaultError):
    """A referenced artifact, version or vault item does not exist."""


class InvalidRecord(VaultError):
    """A stored document does not match the expected record shape."""


class PersistenceError(VaultError):
    code = "unknown"

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        if code is not None:
            self.code = code


class PersistenceDenied(PersistenceError):
    code = "permission-denied"

    hint = "Check the document store's security rules. They may be expired or too restrictive."

    def __str__(self) -> str:
        return f"{super().__str__()} ({self.hint})"


class PayloadTooLarge(PersistenceError):
    code = "resource-exhausted"
