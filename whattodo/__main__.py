"""CLI entrypoint for the terminal reminder."""

from __future__ import annotations

import argparse
import random
from dataclasses import replace
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from whattodo.adapters.clock import SystemClock
from whattodo.adapters.terminal_notifier import TerminalNotifier
from whattodo.application.runtime import ReminderRuntime
from whattodo.config import load_app_config
from whattodo.terminal import TerminalAdapter


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the what-to-do reminder")
    parser.add_argument("--env-file", default=".env", help="Path to env file")
    parser.add_argument("--data-dir", help="Directory for the persisted tasks JSON file")
    parser.add_argument(
        "--poll-minutes",
        type=float,
        help="Minutes between availability checks (default: 5)",
    )
    parser.add_argument(
        "--disable-timers",
        action="store_true",
        help="Disable the periodic availability check",
    )
    parser.add_argument("--bell", action="store_true", help="Ring the terminal bell on ready tasks")
    parser.add_argument("--seed", type=int, help="Seed for the task picker")
    parser.add_argument("--timezone", help="IANA zone name, e.g. Europe/Berlin (default: host zone)")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    config = load_app_config(args.env_file)

    if args.data_dir:
        config = replace(config, data_dir=args.data_dir)
    if args.poll_minutes:
        config = replace(config, poll_interval_minutes=args.poll_minutes)
    if args.disable_timers:
        config = replace(config, enable_timers=False)
    if args.bell:
        config = replace(config, enable_bell=True)
    if args.seed is not None:
        config = replace(config, seed=args.seed)
    if args.timezone:
        config = replace(config, timezone=args.timezone)

    try:
        zone = ZoneInfo(config.timezone) if config.timezone else None
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise SystemExit(f"Unknown timezone: {config.timezone!r}") from exc

    try:
        runtime = ReminderRuntime(
            clock=SystemClock(zone),
            notifier=TerminalNotifier(enable_bell=config.enable_bell),
            rng=random.Random(config.seed),
            persistence_dir=config.data_dir,
            enable_timers=config.enable_timers,
            poll_interval_minutes=config.poll_interval_minutes,
        )
    except ValueError as exc:
        raise SystemExit(str(exc)) from exc

    adapter = TerminalAdapter(runtime)
    try:
        adapter.start()
    except KeyboardInterrupt:
        pass
    finally:
        adapter.stop()
        runtime.close()


if __name__ == "__main__":
    main()
