"""cryptoants.economy

The engine and the scenarios that drive it.
"""

from .engine import EconomyEngine, EggPurchase, LayResult, SaleReceipt

__all__ = [
    "EconomyEngine",
    "EggPurchase",
    "LayResult",
    "SaleReceipt",
]
