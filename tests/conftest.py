from __future__ import annotations

import shutil
import sys
from collections.abc import Callable, Iterable
from pathlib import Path

import pytest

# uv/pytest may run without installing the project; ensure repo root is importable.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from cryptoants.core.config import Config, EconomyConfig  # noqa: E402
from cryptoants.core.randomness import RandomnessSource, ScriptedRandomness  # noqa: E402
from cryptoants.core.time import ManualClock  # noqa: E402
from cryptoants.economy.engine import EconomyEngine  # noqa: E402
from cryptoants.ledger.currency import InMemoryCurrencyLedger  # noqa: E402

from tests._support import ONE_ETHER, OTHER, SAFE_DRAWS, START, USER  # noqa: E402


@pytest.fixture()
def temp_dir(tmp_path: Path) -> Path:
    return tmp_path


@pytest.fixture()
def test_config(temp_dir: Path) -> Config:
    """Config fixture loaded from a copy of the repo's config directory."""

    cfg_src = REPO_ROOT / "config" / "default.yaml"
    cfg_dst_dir = temp_dir / "config"
    cfg_dst_dir.mkdir(parents=True, exist_ok=True)

    shutil.copy2(cfg_src, cfg_dst_dir / "default.yaml")
    shutil.copytree(REPO_ROOT / "config" / "presets", cfg_dst_dir / "presets")

    return Config.from_yaml(cfg_dst_dir / "default.yaml")


@pytest.fixture()
def clock() -> ManualClock:
    return ManualClock(start=START)


@pytest.fixture()
def currency() -> InMemoryCurrencyLedger:
    ledger = InMemoryCurrencyLedger()
    ledger.fund(USER, ONE_ETHER)
    ledger.fund(OTHER, ONE_ETHER)
    return ledger


@pytest.fixture()
def make_engine(
    clock: ManualClock, currency: InMemoryCurrencyLedger
) -> Callable[..., EconomyEngine]:
    """Engine factory. Draws default to a harmless repeating script."""

    def _make(
        draws: Iterable[float] | RandomnessSource = SAFE_DRAWS,
        **economy: object,
    ) -> EconomyEngine:
        randomness = draws if isinstance(draws, RandomnessSource) else ScriptedRandomness(draws, cycle=True)
        return EconomyEngine(
            EconomyConfig(**economy),
            clock=clock,
            randomness=randomness,
            currency=currency,
        )

    return _make


@pytest.fixture()
def engine(make_engine: Callable[..., EconomyEngine]) -> EconomyEngine:
    return make_engine()
