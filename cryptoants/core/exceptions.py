"""cryptoants.core.exceptions

Errors are part of the interface.

Every rejected operation leaves state exactly as it found it.
"""

from __future__ import annotations


class CryptoAntsError(Exception):
    """Base exception for cryptoants."""


class ConfigError(CryptoAntsError):
    """Configuration is missing, invalid, or inconsistent."""


class JournalError(CryptoAntsError):
    """Notification journal failures: broken hash chain or bad append."""


# -----------------
# Economy rejections
# -----------------


class EconomyError(CryptoAntsError):
    """An economy operation was rejected by validation."""


class InsufficientPaymentError(EconomyError):
    """You have to pay for those eggs!"""


class NoEggsAvailableError(EconomyError):
    """No egg, no ant."""


class AntNotFoundError(EconomyError):
    """The ant does not exist, or no longer does."""


class NotOwnerError(EconomyError):
    """Caller does not own the ant."""


class CooldownActiveError(EconomyError):
    """You have to wait."""

    def __init__(self, message: str, *, ready_at: int, remaining_s: int) -> None:
        super().__init__(message)
        self.ready_at = ready_at
        self.remaining_s = remaining_s


# -----------------
# Ledger failures
# -----------------


class LedgerError(CryptoAntsError):
    """Ledger custody failures."""


class MintAuthorityError(LedgerError):
    """Only the ants contract can call this function, please refer to the ants contract."""


class InsufficientFundsError(LedgerError):
    """A wallet or the treasury cannot cover a transfer."""
