"""cryptoants.core

Core primitives.

If a module needs to exist, it should probably depend only on this package.
"""

from .config import Config
from .events import EventType
from .exceptions import CryptoAntsError
from .journal import EventJournal
from .models import Event
from .randomness import RandomnessSource, ScriptedRandomness, SeededRandomness
from .time import Clock, ManualClock, SystemClock

__all__ = [
    "Clock",
    "Config",
    "CryptoAntsError",
    "Event",
    "EventJournal",
    "EventType",
    "ManualClock",
    "RandomnessSource",
    "ScriptedRandomness",
    "SeededRandomness",
    "SystemClock",
]
