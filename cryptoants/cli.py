"""cryptoants.cli

Command line interface entry point for cryptoants.

Design constraints:
- argparse-based.
- Lazy imports: do not import numpy or pydantic at parse time.
"""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Callable
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cryptoants.core.config import Config

EPILOG = "Buy eggs. Hatch ants. Mind the cooldown."


@dataclass(frozen=True)
class CliContext:
    repo_root: Path


def _repo_root_from_cwd() -> Path:
    return Path.cwd()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cryptoants",
        description="Ant/egg economy engine and colony simulator.",
        epilog=EPILOG,
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print version and exit.",
    )

    sub = parser.add_subparsers(dest="command")

    p_config = sub.add_parser("config", help="Print the effective economy configuration")
    p_config.add_argument("--preset", choices=["classic", "gentle", "harsh"], default=None)

    p_sim = sub.add_parser("simulate", help="Run a colony scenario on simulated time")
    p_sim.add_argument("scenario", choices=["death", "colony"])
    p_sim.add_argument("--preset", choices=["classic", "gentle", "harsh"], default=None)
    p_sim.add_argument("--seed", type=int, default=None)
    p_sim.add_argument("--max-cycles", type=int, default=None, help="death: laying attempts before giving up")
    p_sim.add_argument("--target", type=int, default=None, help="colony: ants to create")
    p_sim.add_argument("--json", action="store_true", help="Emit the result as JSON.")

    return parser


def _print_version() -> None:
    from cryptoants import __version__

    print(f"cryptoants v{__version__}")


def _load_config(ctx: CliContext, preset: str | None) -> Config:
    from cryptoants.core.config import Config

    repo_root = ctx.repo_root
    if preset is not None:
        return Config.from_preset(preset, repo_root=repo_root)  # type: ignore[arg-type]

    cfg_user = repo_root / "config" / "user.yaml"
    if cfg_user.exists():
        return Config.from_yaml(cfg_user)
    if (repo_root / "config" / "default.yaml").exists():
        return Config.from_repo_defaults(repo_root)
    return Config()


def _cmd_config(ctx: CliContext, args: argparse.Namespace) -> int:
    from cryptoants import WEI_PER_ETHER

    cfg = _load_config(ctx, args.preset)
    eco = cfg.economy

    print("cryptoants config")
    print(f"- preset: {cfg.preset}")
    print(f"- egg price: {eco.egg_price} wei ({eco.egg_price / WEI_PER_ETHER:g} ether)")
    print(f"- ant sale price: {eco.ant_sale_price} wei ({eco.ant_sale_price / WEI_PER_ETHER:g} ether)")
    print(f"- lay cooldown: {eco.lay_cooldown_seconds}s (from birth: {eco.cooldown_from_birth})")
    print(f"- eggs per lay: {eco.min_eggs_per_lay}..{eco.max_eggs_per_lay}")
    print(f"- death chance: {eco.death_chance:.2%}")
    return 0


def _cmd_simulate(ctx: CliContext, args: argparse.Namespace) -> int:
    from cryptoants.core.config import SimulationConfig
    from cryptoants.core.exceptions import ConfigError
    from cryptoants.core.logs import configure_logging
    from cryptoants.economy.simulation import build_colony, grow_colony, lay_until_death

    cfg = _load_config(ctx, args.preset)
    overrides = {
        "seed": args.seed,
        "max_cycles": args.max_cycles,
        "target_ants": args.target,
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}
    if overrides:
        try:
            sim = SimulationConfig.model_validate({**cfg.simulation.model_dump(), **overrides})
        except ValueError as e:
            raise ConfigError(f"Invalid simulation options: {e}") from e
        cfg = cfg.model_copy(update={"simulation": sim})

    configure_logging(cfg.logging)
    colony = build_colony(cfg)
    engine = colony.engine

    if args.scenario == "death":
        engine.buy_eggs(colony.player, 1, engine.egg_price_for(1))
        ant_id = engine.create_ant(colony.player)
        death = lay_until_death(colony, ant_id, max_cycles=cfg.simulation.max_cycles)
        ok = death.died
        data = asdict(death)
    else:
        growth = grow_colony(colony, target=cfg.simulation.target_ants)
        ok = growth.complete
        data = asdict(growth)

    data["metrics"] = engine.metrics.snapshot()
    data["journal_events"] = len(engine.journal)
    data["journal_ok"] = engine.journal.verify_chain()

    if args.json:
        print(json.dumps(data, sort_keys=True))
    else:
        print(f"cryptoants simulate {args.scenario} (seed={cfg.simulation.seed})")
        for k, v in data.items():
            if k != "metrics":
                print(f"- {k}: {v}")
    return 0 if ok else 1


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        _print_version()
        return 0

    if not args.command:
        parser.print_help()
        return 2

    ctx = CliContext(repo_root=_repo_root_from_cwd())

    dispatch: dict[str, Callable[[CliContext, argparse.Namespace], int]] = {
        "config": _cmd_config,
        "simulate": _cmd_simulate,
    }

    fn = dispatch.get(str(args.command))
    if fn is None:
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return 2

    from cryptoants.core.exceptions import ConfigError

    try:
        return int(fn(ctx, args))
    except ConfigError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
