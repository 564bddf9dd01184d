"""Click CLI: config loading, collaborator wiring, live progress, and output."""

import asyncio
import logging
import random
import sys
from pathlib import Path

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn, TimeElapsedColumn

from config.config_loader import AppConfig, load_config
from devduel.commentary import CommentaryGenerator
from devduel.events import EventBus
from devduel.healthcheck import Probe, run_health_checks
from devduel.models import DuelResult, Platform, ProgressEvent
from devduel.output import print_result, save_to_file
from devduel.pipeline import DuelOrchestrator
from devduel.providers.anthropic import AnthropicProvider
from devduel.providers.base import NarrativeProvider, SDKProvider
from devduel.providers.gemini import GeminiProvider
from devduel.providers.openai_provider import OpenAIProvider
from devduel.resolver import AcquisitionResolver
from devduel.scoring import ScoringEngine
from devduel.sources.actionbook import ActionBookClient
from devduel.sources.base import ProfileSource
from devduel.sources.brightdata import BrightDataSource
from devduel.sources.github import GitHubSource
from devduel.sources.wikipedia import WikipediaSource
from devduel.store import InMemorySessionStore

logger = logging.getLogger(__name__)

console = Console(legacy_windows=False)

# Keyed by the ``sdk`` field of a model entry in settings.yaml
PROVIDER_CLASSES: dict[str, type[SDKProvider]] = {
    "openai": OpenAIProvider,
    "anthropic": AnthropicProvider,
    "gemini": GeminiProvider,
}


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def _build_narrator(config: AppConfig) -> NarrativeProvider | None:
    """The configured narrator, or None when its key is missing (fallback commentary)."""
    name = config.narrator
    if name not in config.models:
        logger.warning("Narrator '%s' not in models, using fallback commentary", name)
        return None
    if name not in config.available_providers:
        logger.warning("Narrator '%s' has no API key, using fallback commentary", name)
        return None
    model_cfg = config.models[name]
    provider_cls = PROVIDER_CLASSES.get(model_cfg.sdk)
    if provider_cls is None:
        logger.warning("Unknown sdk '%s' for narrator '%s'", model_cfg.sdk, name)
        return None
    try:
        return provider_cls(model_cfg)
    except Exception as exc:
        logger.warning("Failed to instantiate narrator '%s': %s", name, exc)
        return None


def _build_sources(config: AppConfig, dom: ActionBookClient) -> dict[Platform, ProfileSource]:
    sources = config.sources
    return {
        "linkedin": BrightDataSource(sources.brightdata, "linkedin"),
        "github": GitHubSource(sources.github, dom=dom),
        "wikipedia": WikipediaSource(sources.wikipedia, dom=dom),
        "generic": BrightDataSource(sources.brightdata, "generic"),
    }


def _build_orchestrator(
    config: AppConfig,
    bus: EventBus,
    dom: ActionBookClient,
    seed: int | None,
) -> DuelOrchestrator:
    rng = random.Random(seed)
    store = InMemorySessionStore()
    narrator = _build_narrator(config)
    model_cfg = config.models.get(config.narrator)
    commentary = CommentaryGenerator(
        narrator,
        config.prompts,
        timeout_sec=config.pipeline.commentary_timeout_sec,
        max_tokens=model_cfg.max_tokens if model_cfg else 1500,
        temperature=model_cfg.temperature if model_cfg else 0.9,
    )
    return DuelOrchestrator(
        store=store,
        bus=bus,
        resolver=AcquisitionResolver(_build_sources(config, dom), store, rng),
        engine=ScoringEngine(config.weights, rng),
        commentary=commentary,
        ticker_interval_sec=config.pipeline.ticker_interval_sec,
        health_timeout_sec=config.pipeline.health_timeout_sec,
        dom=dom,
    )


def _print_health(probes: dict[str, Probe], timeout: float) -> None:
    """Probe collaborators and print results. Failures are informational: every stage has a fallback."""
    console.print("\n[bold]Checking services...[/bold]")
    results = asyncio.run(run_health_checks(probes, timeout=timeout))
    for name in sorted(results):
        ok, err = results[name]
        if ok:
            console.print(f"  [green]OK  [/green] {name}")
        else:
            short_err = err.splitlines()[0][:120] if err else "unknown error"
            console.print(f"  [yellow]DOWN[/yellow] {name}: {short_err} [dim](fallback will be used)[/dim]")
    console.print()


async def _run(orchestrator: DuelOrchestrator, bus: EventBus, url1: str, url2: str) -> DuelResult:
    session_id = orchestrator.create_session(url1, url2)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("{task.completed:>3.0f}%"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("Entering the arena...", total=100)

        def on_event(event: ProgressEvent) -> None:
            if event.progress > 0:
                progress.update(task, completed=event.progress, description=event.message)
            else:
                progress.print(f"[yellow]![/yellow] {event.message}")

        unsubscribe = bus.subscribe(session_id, on_event)
        try:
            return await orchestrator.run_duel(url1, url2, session_id=session_id)
        finally:
            unsubscribe()


@click.command()
@click.argument("url1")
@click.argument("url2")
@click.option("--output", "output_path", default=None, help="Output directory (default: from config)")
@click.option("--no-save", is_flag=True, default=False, help="Do not write the markdown report")
@click.option("--verbose", is_flag=True, help="Enable DEBUG-level logging")
@click.option("--skip-health-check", is_flag=True, default=False,
              help="Skip the service connectivity check at startup")
@click.option("--seed", default=None, type=int, help="Seed for demo-profile and technique picks")
def main(
    url1: str,
    url2: str,
    output_path: str | None,
    no_save: bool,
    verbose: bool,
    skip_health_check: bool,
    seed: int | None,
) -> None:
    """DevDuel -- pit two developer profiles against each other.

    \b
    Examples:
      devduel https://github.com/torvalds https://github.com/gvanrossum
      devduel https://en.wikipedia.org/wiki/Ada_Lovelace https://www.linkedin.com/in/someone
      devduel URL1 URL2 --seed 7 --no-save
    """
    if sys.platform == "win32":
        if hasattr(sys.stdout, "reconfigure"):
            sys.stdout.reconfigure(encoding="utf-8", errors="replace")
        if hasattr(sys.stderr, "reconfigure"):
            sys.stderr.reconfigure(encoding="utf-8", errors="replace")

    load_dotenv()
    _setup_logging(verbose)

    try:
        config = load_config()
    except FileNotFoundError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        sys.exit(1)

    effective_output = Path(output_path) if output_path else config.pipeline.output_dir

    bus = EventBus()
    dom = ActionBookClient(config.sources.actionbook)
    orchestrator = _build_orchestrator(config, bus, dom, seed)

    if not skip_health_check:
        _print_health(orchestrator.health_probes(), config.pipeline.health_timeout_sec)

    console.print(f"\n[bold cyan]DevDuel[/bold cyan]: {url1} [bold]vs[/bold] {url2}\n")

    try:
        result = asyncio.run(_run(orchestrator, bus, url1, url2))
    except Exception as exc:
        console.print(f"[bold red]Duel failed:[/bold red] {exc}")
        sys.exit(1)

    print_result(result)

    if not no_save:
        saved_path = save_to_file(result, effective_output)
        console.print(f"\n[dim]Saved to: {saved_path}[/dim]")


if __name__ == "__main__":
    main()
