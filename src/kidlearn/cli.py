"""CLI entry point for KidLearn."""

from pathlib import Path
from typing import Optional

import click

from kidlearn.config.settings import Settings, StorageBackend
from kidlearn.engine.adaptive import PerformanceSnapshot
from kidlearn.engine.controller import DifficultyController
from kidlearn.engine.levels import DEFAULT_LEVEL, get_level, list_levels
from kidlearn.logging_config import configure_logging


def _controller(ctx: click.Context) -> DifficultyController:
    if ctx.obj.get("controller") is None:
        ctx.obj["controller"] = DifficultyController.from_settings(ctx.obj["settings"])
    return ctx.obj["controller"]


def _describe(level_number: int) -> str:
    return f"{level_number} ({get_level(level_number).name})"


@click.group()
@click.option("--config", "config_path", type=click.Path(dir_okay=False, path_type=Path),
              help="Path to config.yaml")
@click.option("--data-dir", type=click.Path(file_okay=False, path_type=Path),
              help="Directory for learner data")
@click.option("--storage", type=click.Choice([b.value for b in StorageBackend]),
              help="Storage backend override")
@click.option("--debug", is_flag=True, help="Verbose console logging")
@click.pass_context
def main(
    ctx: click.Context,
    config_path: Optional[Path],
    data_dir: Optional[Path],
    storage: Optional[str],
    debug: bool,
) -> None:
    """KidLearn: adaptive difficulty for young English learners."""
    settings = Settings.load(config_path)
    if data_dir is not None:
        settings.data_dir = data_dir
    if storage is not None:
        settings.storage.backend = StorageBackend(storage)
    if debug:
        settings.debug = True
        settings.log_level = "DEBUG"
    configure_logging(settings.log_level, debug=settings.debug)

    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings
    ctx.obj.setdefault("controller", None)


@main.command()
@click.argument("child_id")
@click.pass_context
def init(ctx: click.Context, child_id: str) -> None:
    """Start a learner fresh at Easy level."""
    settings = _controller(ctx).initialize(child_id)
    click.echo(f"Initialized {child_id} at level {_describe(settings.current_difficulty)}")


@main.command()
@click.argument("child_id")
@click.option("--module", default="", help="Learning module, e.g. reading")
@click.option("--activity", default="", help="Activity identifier")
@click.option("--accuracy", type=float, required=True, help="Fraction correct, 0-1")
@click.option("--speed", type=float, required=True, help="Normalized speed, 0-1")
@click.option("--engagement", type=float, required=True, help="Engagement proxy, 0-1")
@click.option("--time-spent", type=float, default=0.0, show_default=True, help="Seconds")
@click.option("--attempts", type=int, default=1, show_default=True)
@click.option("--hints-used", type=int, default=0, show_default=True)
@click.pass_context
def record(
    ctx: click.Context,
    child_id: str,
    module: str,
    activity: str,
    accuracy: float,
    speed: float,
    engagement: float,
    time_spent: float,
    attempts: int,
    hints_used: int,
) -> None:
    """Record one completed activity."""
    controller = _controller(ctx)
    before = controller.get_settings(child_id).current_difficulty
    controller.record_performance(child_id, PerformanceSnapshot(
        module=module,
        activity=activity,
        accuracy=accuracy,
        speed=speed,
        engagement=engagement,
        time_spent=time_spent,
        attempts=attempts,
        hints_used=hints_used,
    ))
    after = controller.get_settings(child_id).current_difficulty
    if after != before:
        click.echo(f"Difficulty changed: {_describe(before)} -> {_describe(after)}")
    else:
        click.echo(f"Recorded. Difficulty stays at {_describe(after)}")


@main.command()
@click.argument("child_id")
@click.pass_context
def level(ctx: click.Context, child_id: str) -> None:
    """Show the learner's current level and content modifiers."""
    current = _controller(ctx).get_current_difficulty_level(child_id)
    m = current.modifiers
    click.echo(f"Level {current.level}: {current.name}: {current.description}")
    click.echo(f"  time limit: {m.time_limit or 'none'}")
    click.echo(f"  hints:      {m.hints}")
    click.echo(f"  attempts:   {m.attempts}")
    click.echo(f"  complexity: {m.complexity}")


@main.command()
@click.argument("child_id")
@click.pass_context
def insights(ctx: click.Context, child_id: str) -> None:
    """Show progression, recommendations and the next milestone."""
    report = _controller(ctx).get_difficulty_insights(child_id)
    click.echo(f"Current level: {_describe(report.current_level)}")
    click.echo(f"Progression:   {report.progression:.0%}")
    click.echo(f"Next milestone: {report.next_milestone}")
    for rec in report.recommendations:
        click.echo(f"  * {rec}")


@main.command()
@click.argument("child_id")
@click.pass_context
def reset(ctx: click.Context, child_id: str) -> None:
    """Clear history and return the learner to Easy level."""
    _controller(ctx).reset_difficulty(child_id)
    click.echo(f"Reset {child_id} to level {_describe(DEFAULT_LEVEL)}")


@main.command()
def levels() -> None:
    """List the difficulty catalog."""
    for entry in list_levels():
        click.echo(f"  {entry.level}: {entry.name}: {entry.description}")


@main.command()
@click.pass_context
def serve(ctx: click.Context) -> None:
    """Serve the JSON-lines protocol on stdin/stdout."""
    import asyncio

    from kidlearn.server.__main__ import main as serve_main

    asyncio.run(serve_main(ctx.obj["settings"]))


@main.command()
@click.argument("child_id")
@click.pass_context
def dashboard(ctx: click.Context, child_id: str) -> None:
    """Open the parent insights dashboard."""
    from kidlearn.app.main_app import InsightsApp

    app = InsightsApp(child_id=child_id, settings=ctx.obj["settings"], controller=_controller(ctx))
    app.run()
