"""
Command-line interface for the desktop refresher.
"""

from __future__ import annotations
import asyncio
import logging
import signal
from typing import Awaitable, Callable, Optional

import click

from deskrefresh import __version__
from deskrefresh.config import RefreshConfig
from deskrefresh.playback import InjectionError, OSController, RefreshSequence, SequenceStep
from deskrefresh.scheduler import RefreshScheduler


STEP_MESSAGES = {
    SequenceStep.SHOW_DESKTOP: "📋 Show desktop ({keys})...",
    SequenceStep.MOVE_POINTER: "🖱️  Moving pointer to ({x}, {y})",
    SequenceStep.OPEN_CONTEXT_MENU: "🔄 Right-clicking the desktop...",
    SequenceStep.REFRESH: "⌨️  Choosing refresh ({keys})...",
    SequenceStep.SWITCH_BACK: "🔄 Switching back to the previous window ({keys})...",
}


def _minutes(interval: int) -> str:
    return f"{interval} minute" if interval == 1 else f"{interval} minutes"


def build_scheduler(
    config: RefreshConfig,
    controller: Optional[OSController] = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> RefreshScheduler:
    """Wire the sequence and scheduler to console progress output."""
    sequence = RefreshSequence(controller or OSController(), config, sleep=sleep)
    scheduler = RefreshScheduler(sequence, config, sleep=sleep)

    def on_step(step: SequenceStep) -> None:
        keys = {
            SequenceStep.SHOW_DESKTOP: config.show_desktop_keys,
            SequenceStep.REFRESH: config.refresh_keys,
            SequenceStep.SWITCH_BACK: config.switch_back_keys,
        }.get(step, [])
        click.echo(STEP_MESSAGES[step].format(
            keys=" + ".join(k.upper() for k in keys),
            x=config.pointer.x,
            y=config.pointer.y,
        ))

    def on_attempt(attempt: int) -> None:
        click.echo(f"\n📊 Refresh attempt #{attempt}")
        click.echo("🚀 Running refresh sequence...")

    def on_success(attempt: int) -> None:
        click.echo("✅ Refresh sequence complete")
        click.echo(f"⏳ Waiting {_minutes(config.interval)}...")

    def on_failure(attempt: int, error: InjectionError) -> None:
        click.echo(f"❌ Refresh sequence failed: {error}", err=True)
        click.echo(f"⚠️  Retrying in {_minutes(config.interval)}...", err=True)

    sequence.on_step = on_step
    scheduler.on_attempt = on_attempt
    scheduler.on_success = on_success
    scheduler.on_failure = on_failure
    return scheduler


async def _serve(scheduler: RefreshScheduler) -> int:
    """Run the scheduler, stopping it on Ctrl+C where the loop supports signal handlers."""
    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, scheduler.stop)
    except (NotImplementedError, RuntimeError):
        # Windows: Ctrl+C surfaces as KeyboardInterrupt from asyncio.run
        pass
    return await scheduler.run()


def run_scheduler(scheduler: RefreshScheduler) -> int:
    return asyncio.run(_serve(scheduler))


@click.command()
@click.version_option(version=__version__)
@click.argument("interval", type=click.IntRange(min=1), default=15)
def main(interval: int):
    """
    Desktop Refresh - periodically refresh the desktop.

    Every INTERVAL minutes (default 15) this shows the desktop, right-clicks
    its centre, presses R to refresh and switches back with Alt+Tab.

    WARNING: this drives your real mouse and keyboard.
    """
    logging.basicConfig(
        level=logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = RefreshConfig(interval=interval)
    scheduler = build_scheduler(config)

    click.echo("🎯 Desktop refresher started!")
    click.echo(f"⏰ Refreshing every {_minutes(config.interval)}")
    click.echo("🛑 Press Ctrl+C to exit\n")
    click.echo(f"⏳ First refresh in {config.settle_delay:g} seconds...")

    try:
        attempts = run_scheduler(scheduler)
    except KeyboardInterrupt:
        attempts = None

    click.echo("\n🛑 Interrupted by user, exiting...")
    if attempts is not None:
        click.echo(f"   {attempts} refresh attempt(s) made")


if __name__ == "__main__":
    main()
