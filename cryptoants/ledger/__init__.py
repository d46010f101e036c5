"""cryptoants.ledger

Custody: who holds which eggs, ants, and coins.
"""

from .ants import Ant, AntRegistry
from .currency import CurrencyLedger, InMemoryCurrencyLedger
from .eggs import EggLedger

__all__ = [
    "Ant",
    "AntRegistry",
    "CurrencyLedger",
    "EggLedger",
    "InMemoryCurrencyLedger",
]
