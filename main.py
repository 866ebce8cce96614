"""Entry point for the flood-response walkthrough.

Usage:
    python main.py                              # Default walkthrough in real time
    python main.py --simulated                  # Same, on simulated time (instant)
    python main.py --water-mode autonomous      # Water rises on its own in stage 1
    python main.py --script "advance,rain,wait:2,reset"
    python main.py --verbose                    # Debug logging
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
import sys

import click

from walkthrough.clock import ManualClock
from walkthrough.config import NETWORK_MODES, WATER_MODES, WalkthroughSettings, load_config
from walkthrough.console import DEFAULT_SCRIPT, Step, parse_script, play, realtime_wait, render_snapshot
from walkthrough.controller import NarrativeController
from walkthrough.models import Snapshot


def _setup_logging(verbose: bool = False, log_file: str | None = None) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    fmt = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(level=level, format=fmt, handlers=handlers)


def _echo_snapshot(snap: Snapshot) -> None:
    click.echo(render_snapshot(snap) + "\n")


async def _run_realtime(settings: WalkthroughSettings, steps: list[Step]) -> Snapshot:
    controller = NarrativeController.create(settings)
    controller.subscribe(_echo_snapshot)
    try:
        return await play(controller, steps, realtime_wait(settings.time_unit_seconds))
    finally:
        controller.dispose()


def _run_simulated(settings: WalkthroughSettings, steps: list[Step]) -> Snapshot:
    clock = ManualClock()
    controller = NarrativeController.create(settings, clock=clock)
    controller.subscribe(_echo_snapshot)

    async def _wait(units: float) -> None:
        clock.advance(units * settings.time_unit_seconds)

    try:
        return asyncio.run(play(controller, steps, _wait))
    finally:
        controller.dispose()


@click.command()
@click.option("--script", default=DEFAULT_SCRIPT, show_default=True, help="Comma separated steps")
@click.option("--water-mode", type=click.Choice(WATER_MODES), default=None, help="Override water simulation")
@click.option("--network-mode", type=click.Choice(NETWORK_MODES), default=None, help="Override network simulation")
@click.option("--simulated", is_flag=True, help="Run on simulated time instead of sleeping")
@click.option("--verbose", is_flag=True, help="Enable debug logging")
@click.option("--config-dir", type=click.Path(), default=None, help="Config directory")
def main(
    script: str,
    water_mode: str | None,
    network_mode: str | None,
    simulated: bool,
    verbose: bool,
    config_dir: str | None,
) -> None:
    """Flood-response walkthrough: detection -> monitoring -> analysis -> execution -> rescue."""

    cfg = load_config(config_dir)

    log_file = cfg.get("storage", {}).get("log_file")
    _setup_logging(verbose=verbose, log_file=log_file)

    settings = WalkthroughSettings.from_config(cfg)
    overrides = {}
    if water_mode:
        overrides["water_mode"] = water_mode
    if network_mode:
        overrides["network_mode"] = network_mode
    if overrides:
        settings = dataclasses.replace(settings, **overrides)

    try:
        steps = parse_script(script)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--script") from e

    if simulated:
        final = _run_simulated(settings, steps)
    else:
        try:
            final = asyncio.run(_run_realtime(settings, steps))
        except KeyboardInterrupt:
            click.echo("\nWalkthrough interrupted.")
            return

    click.echo(f"Finished at stage {final.stage} with {len(final.log)} log entries.")


if __name__ == "__main__":
    main()
