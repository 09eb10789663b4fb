"""CLI commands for evaluating and inspecting the content gate."""

import json
import logging
import sys
from datetime import datetime
from pathlib import Path

import click

from content_gate.fetch.config import ResolverConfig
from content_gate.fetch.constants import PUSH_ID_PARAM
from content_gate.fetch.metrics import ResolverMetrics
from content_gate.fetch.query import set_query_param
from content_gate.fetch.resolver import RedirectResolver
from content_gate.gate.factory import create_evaluator, default_options
from content_gate.gate.metrics import GateMetrics
from content_gate.observability.logging import configure_logging
from content_gate.settings.app import GateSettings, get_settings
from content_gate.store.decisions import DecisionCache
from content_gate.store.keys import DecisionKeys
from content_gate.store.metrics import StoreMetrics
from content_gate.store.sqlite import SqliteStore


DATE_FORMATS = ["%Y-%m-%d", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%dT%H:%M:%S%z"]


def _setup_logging(verbose: bool, json_logs: bool) -> None:
    configure_logging(
        level=logging.DEBUG if verbose else logging.WARNING,
        json_format=json_logs,
    )


def _load_settings(
    state_path: Path | None,
    user_id: str | None,
    device_model: str | None,
) -> GateSettings:
    """Apply command-line overrides on top of environment settings."""
    settings = get_settings()
    overrides: dict[str, object] = {}
    if state_path is not None:
        overrides["db_path"] = state_path
    if user_id is not None:
        overrides["user_id"] = user_id
    if device_model is not None:
        overrides["device_model"] = device_model
    return settings.model_copy(update=overrides)


@click.group()
@click.version_option(version="0.1.0")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.option("--json-logs", is_flag=True, help="Emit logs as JSON.")
def cli(verbose: bool, json_logs: bool) -> None:
    """One-time content-routing gate."""
    _setup_logging(verbose, json_logs)


@cli.command()
@click.argument("url")
@click.option(
    "--target-date",
    required=True,
    type=click.DateTime(formats=DATE_FORMATS),
    help="Earliest date external content may be shown (UTC when no offset).",
)
@click.option("--cache-key", default=None, help="Decision key (defaults to URL).")
@click.option(
    "--device-check/--no-device-check",
    default=True,
    help="Exclude unsupported device classes.",
)
@click.option(
    "--timeout",
    type=click.FloatRange(min=0.1, max=300.0),
    default=None,
    help="Per-probe timeout in seconds.",
)
@click.option(
    "--state",
    "state_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to SQLite state database.",
)
@click.option("--user-id", default=None, help="Value sent as push_id.")
@click.option("--device-model", default=None, help="Reported device model.")
@click.option(
    "--show-metrics", is_flag=True, help="Print evaluation metrics to stderr."
)
def evaluate(
    url: str,
    target_date: datetime,
    cache_key: str | None,
    device_check: bool,
    timeout: float | None,
    state_path: Path | None,
    user_id: str | None,
    device_model: str | None,
    show_metrics: bool,
) -> None:
    """Evaluate the gate for URL and print the result as JSON."""
    settings = _load_settings(state_path, user_id, device_model)
    options = default_options(settings).model_copy(
        update={
            "cache_key": cache_key,
            "device_check": device_check,
            **({"timeout_seconds": timeout} if timeout is not None else {}),
        }
    )

    with SqliteStore(settings.db_path) as store:
        evaluator = create_evaluator(settings, store)
        result = evaluator.evaluate(url, target_date, options)

    click.echo(json.dumps(result.model_dump(), indent=2))
    if show_metrics:
        metrics = {
            **GateMetrics.get_instance().to_dict(),
            **ResolverMetrics.get_instance().to_dict(),
            **StoreMetrics.get_instance().to_dict(),
        }
        click.echo(json.dumps(metrics, indent=2, sort_keys=True), err=True)


@cli.command()
@click.argument("url")
@click.option(
    "--timeout",
    type=click.FloatRange(min=0.1, max=300.0),
    default=None,
    help="Deadline in seconds for the whole redirect chain.",
)
@click.option("--user-id", default=None, help="Append this value as push_id.")
def resolve(url: str, timeout: float | None, user_id: str | None) -> None:
    """Follow URL's redirect chain and print every hop as JSON."""
    settings = get_settings()
    resolver = RedirectResolver(
        ResolverConfig(
            user_agent=settings.user_agent,
            max_redirects=settings.max_redirects,
        )
    )
    request_url = set_query_param(url, PUSH_ID_PARAM, user_id) if user_id else url
    result = resolver.resolve(request_url, timeout or settings.probe_timeout_seconds)

    output = result.model_dump(mode="json")
    output["success"] = result.success
    output["reason"] = result.reason
    click.echo(json.dumps(output, indent=2))
    if not result.success:
        sys.exit(1)


@cli.command()
@click.argument("url")
@click.option("--cache-key", default=None, help="Decision key (defaults to URL).")
@click.option(
    "--state",
    "state_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Path to SQLite state database.",
)
def show(url: str, cache_key: str | None, state_path: Path | None) -> None:
    """Print the persisted decision and path id for URL."""
    settings = _load_settings(state_path, None, None)
    keys = DecisionKeys.derive(url, cache_key)

    with SqliteStore(settings.db_path) as store:
        cache = DecisionCache(store)
        record = cache.load(keys)
        path_id = cache.load_path_id(keys, url)

    output = record.model_dump()
    output["path_id"] = path_id.path_id if path_id else None
    click.echo(json.dumps(output, indent=2))


@cli.command()
@click.option("--prefix", default="", help="Only list keys starting with this prefix.")
@click.option(
    "--state",
    "state_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Path to SQLite state database.",
)
def dump(prefix: str, state_path: Path | None) -> None:
    """Print every stored record and the schema version as JSON."""
    settings = _load_settings(state_path, None, None)

    with SqliteStore(settings.db_path) as store:
        output = {
            "schema_version": store.get_schema_version(),
            "entries": store.list_entries(prefix),
        }

    click.echo(json.dumps(output, indent=2))


if __name__ == "__main__":
    cli()
