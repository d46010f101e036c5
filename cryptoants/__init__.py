"""cryptoants: a closed economy of eggs and ants.

Eggs are bought. Ants hatch from eggs. Ants lay eggs, sometimes for the last time.
Ants are sold back to the colony treasury.
"""

from __future__ import annotations

__all__ = [
    "__version__",
    "WEI_PER_ETHER",
]

__version__ = "1.0.0"

# Amounts are integers in the smallest currency unit.
WEI_PER_ETHER = 10**18
