"""Entry-point for driving ALE from the command line."""

from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path
from typing import Any, Callable, Optional

import numpy as np
import yaml
from dotenv import load_dotenv

from alefifo.actions import PLAYER_A_ACTIONS, action_code
from alefifo.env import ALEEnv, EnvConfig
from alefifo.types import Outcome, PoolingMethod
from alefifo.utils import save_frame

LOGGER = logging.getLogger("alefifo")


def _parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="ALE fifo controller")
    parser.add_argument(
        "--config",
        type=Path,
        default=Path("configs/default.yaml"),
        help="Path to YAML config",
    )
    parser.add_argument("--ale", type=str, default=None, help="Override ALE executable path")
    parser.add_argument("--rom", type=Path, default=None, help="Override ROM path from config")
    parser.add_argument(
        "--max-steps",
        type=int,
        default=None,
        help="Controller steps to run before exiting (0 = until ALE stops)",
    )
    parser.add_argument("--frame-skip", type=int, default=None, help="Frames per controller action")
    parser.add_argument(
        "--pooling",
        type=str,
        choices=[m.value for m in PoolingMethod],
        default=None,
        help="How to combine the last two frames",
    )
    parser.add_argument("--dump-dir", type=Path, default=None, help="Write pooled frames as PNG here")
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Python logging level",
    )
    return parser.parse_args(argv)


def load_config(path: Path) -> dict[str, Any]:
    if not path.exists():
        LOGGER.warning("Config %s not found; using defaults", path)
        return {}
    with path.open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle) or {}


def build_env_config(cfg: dict[str, Any], args: argparse.Namespace) -> EnvConfig:
    env_cfg = cfg.get("env", {}) or {}
    sess_cfg = cfg.get("session", {}) or {}
    ale_path = args.ale or env_cfg.get("ale_path") or os.environ.get("ALE_PATH", "ale")
    rom_path = args.rom or env_cfg.get("rom") or os.environ.get("ALE_ROM")
    if not rom_path:
        raise SystemExit("No ROM configured: set env.rom, --rom or ALE_ROM")
    frame_skip = args.frame_skip if args.frame_skip is not None else sess_cfg.get("frame_skip", 1)
    pooling = args.pooling or sess_cfg.get("pooling", "none")
    return EnvConfig(
        ale_path=str(ale_path),
        rom_path=str(rom_path),
        working_dir=env_cfg.get("working_dir"),
        record_screen_dir=env_cfg.get("record_screen_dir"),
        extra_args=[str(a) for a in env_cfg.get("extra_args", []) or []],
        wants_screen=bool(sess_cfg.get("wants_screen", True)),
        wants_ram=bool(sess_cfg.get("wants_ram", True)),
        wants_signal=bool(sess_cfg.get("wants_signal", True)),
        frame_skip=int(frame_skip),
        use_rle=bool(sess_cfg.get("use_rle", True)),
        pooling=PoolingMethod.parse(pooling),
    )


def build_policy(run_cfg: dict[str, Any]) -> Callable[[], int]:
    """Random joystick actions, or a single named action repeated forever."""

    choice = str(run_cfg.get("action", "random"))
    if choice != "random":
        code = action_code(choice)
        return lambda: code
    rng = np.random.default_rng(int(run_cfg.get("seed", 0)))
    codes = [action_code(name) for name in PLAYER_A_ACTIONS]
    return lambda: int(rng.choice(codes))


def run(env: ALEEnv, policy: Callable[[], int], max_steps: int, dump_dir: Optional[Path] = None) -> list[int]:
    """Drive ``env`` until ``max_steps`` actions or the simulator stops; returns episode returns."""

    returns: list[int] = []
    episode_return = 0
    steps = 0
    while max_steps == 0 or steps < max_steps:
        obs, outcome = env.step(policy())
        steps += 1
        if outcome is Outcome.TERMINATED or env.wants_terminate():
            LOGGER.info("Simulator ended the session after %s steps", steps)
            break
        episode_return += obs.signal.reward
        if dump_dir is not None and env.config.wants_screen:
            save_frame(obs.screen, dump_dir / f"frame_{obs.step_idx:06d}.png")
        if obs.signal.terminal:
            returns.append(episode_return)
            LOGGER.info("Episode %s finished return=%s lives=%s", len(returns), episode_return, obs.signal.lives)
            episode_return = 0
            _, outcome = env.reset()
            if outcome is Outcome.TERMINATED:
                break
    if episode_return:
        returns.append(episode_return)
    return returns


def main(argv: Optional[list[str]] = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO))
    load_dotenv()
    cfg = load_config(args.config)
    run_cfg = cfg.get("run", {}) or {}
    env_config = build_env_config(cfg, args)
    max_steps = args.max_steps if args.max_steps is not None else int(run_cfg.get("max_steps", 0))
    dump_dir = args.dump_dir or (Path(run_cfg["dump_dir"]) if run_cfg.get("dump_dir") else None)
    policy = build_policy(run_cfg)
    with ALEEnv(env_config) as env:
        LOGGER.info(
            "Environment initialized with ROM=%s screen=%sx%s",
            env_config.rom_path,
            env.dimensions.width,
            env.dimensions.height,
        )
        returns = run(env, policy, max_steps, dump_dir)
    LOGGER.info("Episode returns: %s", returns)


if __name__ == "__main__":
    main()
