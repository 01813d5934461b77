"""
Click-based CLI for the F1 statistics data layer.

Usage:
    python -m src.cli smoke
    python -m src.cli standings --season 2024
    python -m src.cli standings --constructors
"""
import sys
import time
from datetime import date
from typing import Callable

import click

from src.config import cfg
from src.ingest_jolpica import F1Queries, JolpicaError
from src.utils.logger import setup_logger, logger


class SmokeCheckFailed(Exception):
    """A smoke check got a response with unexpected content."""


def _require(condition: bool, message: str) -> None:
    if not condition:
        raise SmokeCheckFailed(message)


def _check_driver_standings(q: F1Queries) -> None:
    standings = q.get_driver_standings()
    _require(bool(standings), "No driver standings found")
    _require("Driver" in standings[0] and "position" in standings[0],
             "Invalid driver standing structure")


def _check_constructor_standings(q: F1Queries) -> None:
    _require(bool(q.get_constructor_standings()), "No constructor standings found")


def _check_last_race(q: F1Queries) -> None:
    race = q.get_race()
    _require(race is not None, "No race results found")
    _require(bool(race.get("raceName")) and "Circuit" in race, "Invalid race structure")


def _check_seasons(q: F1Queries) -> None:
    seasons = q.get_seasons()
    _require(bool(seasons), "No seasons found")
    recent = date.today().year - 1
    _require(
        any(s["season"].isdigit() and int(s["season"]) >= recent for s in seasons),
        "No recent seasons found",
    )


def _check_rounds(q: F1Queries) -> None:
    _require(bool(q.get_rounds("current")), "No races found for current season")


def _check_circuits(q: F1Queries) -> None:
    _require(bool(q.get_circuits()), "No circuits found")


SMOKE_CHECKS: list[tuple[str, Callable[[F1Queries], None]]] = [
    ("Current Driver Standings", _check_driver_standings),
    ("Current Constructor Standings", _check_constructor_standings),
    ("Last Race Results", _check_last_race),
    ("Available Seasons", _check_seasons),
    ("Current Season Rounds", _check_rounds),
    ("Current Season Circuits", _check_circuits),
]

SMOKE_PAUSE = 0.2  # seconds between endpoints


def run_smoke_checks(
    queries: F1Queries,
    pause: float = SMOKE_PAUSE,
    sleep: Callable[[float], None] = time.sleep,
) -> list[tuple[str, str | None]]:
    """
    Run every smoke check, pausing between endpoints to stay under rate limits.

    Returns:
        (name, error message or None) per check.
    """
    results = []
    for index, (name, check) in enumerate(SMOKE_CHECKS):
        if index:
            sleep(pause)
        logger.info(f"Testing {name}...")
        try:
            check(queries)
        except (JolpicaError, SmokeCheckFailed) as e:
            logger.error(f"{name} - FAILED: {e}")
            results.append((name, str(e)))
        else:
            logger.success(f"{name} - PASSED")
            results.append((name, None))
    return results


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """🏎️  F1 statistics data layer"""
    setup_logger(log_dir=cfg.log.dir, level=cfg.log.level)
    ctx.ensure_object(dict)
    if "queries" not in ctx.obj:
        ctx.obj["queries"] = F1Queries()


@cli.command()
@click.pass_context
def smoke(ctx: click.Context) -> None:
    """Hit the critical endpoints and report which ones work."""
    click.echo(f"Testing against: {cfg.api.base_url}")
    results = run_smoke_checks(ctx.obj["queries"], sleep=ctx.obj.get("sleep", time.sleep))

    click.echo("=" * 50)
    for name, error in results:
        click.echo(f"{name:<32} {'FAILED' if error else 'PASSED'}")
        if error:
            click.echo(f"  Error: {error}")
    failed = sum(1 for _, error in results if error)
    click.echo("=" * 50)
    click.echo(f"Total: {len(results)} | Passed: {len(results) - failed} | Failed: {failed}")
    if failed:
        sys.exit(1)


@cli.command()
@click.option("--season", default="current", show_default=True, help="'current' or a year.")
@click.option("--constructors", is_flag=True, help="Show constructor standings instead of drivers.")
@click.pass_context
def standings(ctx: click.Context, season: str, constructors: bool) -> None:
    """Print the championship standings for a season."""
    queries: F1Queries = ctx.obj["queries"]
    try:
        if constructors:
            rows = [
                (s["position"], s["Constructor"]["name"], s["points"], s["wins"])
                for s in queries.get_constructor_standings(season)
            ]
        else:
            rows = [
                (s["position"], f"{s['Driver']['givenName']} {s['Driver']['familyName']}",
                 s["points"], s["wins"])
                for s in queries.get_driver_standings(season)
            ]
    except JolpicaError as e:
        raise click.ClickException(f"{e} ({e.url})")

    if not rows:
        click.echo(f"No standings available for {season}.")
        return
    for position, name, points, wins in rows:
        click.echo(f"{position:>3}  {name:<28} {points:>7} pts  {wins:>2} wins")


if __name__ == "__main__":
    cli()
