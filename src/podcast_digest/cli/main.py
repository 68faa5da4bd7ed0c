#!/usr/bin/env python3
"""
Podcast Digest CLI - browse the catalog and summarize episodes from a terminal
"""

from __future__ import annotations

import asyncio

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from podcast_digest.errors import AlreadyExistsError, PodcastDigestError
from podcast_digest.log import configure_logging
from podcast_digest.models import EpisodeMetadata
from podcast_digest.settings import settings
from podcast_digest.text_clean import truncate_for_display

console = Console()


def _services():
    from podcast_digest.service.app import build_services

    return build_services(settings)


@click.group()
@click.option("--log-level", default=None, help="Override PODCAST_DIGEST_LOG_LEVEL")
def cli(log_level):
    """Podcast Digest - discover podcasts and summarize episodes"""
    configure_logging(log_level)


@cli.command()
def version():
    """Print the package version"""
    from podcast_digest import __version__

    click.echo(__version__)


@cli.command()
def serve():
    """Run the HTTP API"""
    from podcast_digest.service.server import main

    main()


@cli.command()
@click.argument("query")
@click.option("--page", default=1, help="Result page (1-based)")
@click.option("--page-size", default=settings.default_page_size, help="Results per page")
def search(query, page, page_size):
    """Search podcasts in the catalog"""

    async def _run():
        services = _services()
        try:
            return await services.catalog.search_podcasts(query, page=page, page_size=page_size)
        finally:
            await services.aclose()

    try:
        podcasts = asyncio.run(_run())
    except PodcastDigestError as e:
        raise click.ClickException(e.message)

    if not podcasts:
        console.print("[yellow]No podcasts found[/yellow]")
        return

    table = Table(title=f"Podcasts for '{query}'")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Title", style="green")
    table.add_column("Publisher", style="blue")
    table.add_column("Description", style="white", overflow="fold")
    for p in podcasts:
        table.add_row(p.id, p.title, p.publisher or "", truncate_for_display(p.description, 100))
    console.print(table)


@cli.command()
@click.argument("podcast_id")
@click.option("--page", default=1, help="Episode page (1-based)")
@click.option("--page-size", default=settings.default_page_size, help="Episodes per page")
def episodes(podcast_id, page, page_size):
    """List a podcast's episodes"""

    async def _run():
        services = _services()
        try:
            return await services.catalog.episodes(podcast_id, page=page, page_size=page_size)
        finally:
            await services.aclose()

    try:
        eps = asyncio.run(_run())
    except PodcastDigestError as e:
        raise click.ClickException(e.message)

    if not eps:
        console.print("[yellow]No episodes found[/yellow]")
        return

    table = Table(title=f"Episodes of {podcast_id} (page {page})")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Title", style="green")
    table.add_column("Description", style="white", overflow="fold")
    for e in eps:
        table.add_row(e.id, e.title, truncate_for_display(e.description, 120))
    console.print(table)


@cli.command()
@click.argument("episode_id")
@click.option("--language", default="en", help="Summary language code (en, es, fr, de, zh, ...)")
@click.option("--save-for", "user_id", default=None, help="Save the summary for this user id")
def summarize(episode_id, language, user_id):
    """Summarize one episode (transcript if available, else description)"""

    async def _run():
        services = _services()
        try:
            text = await services.catalog.episode_text(episode_id)
            outcome = await services.summarizer.summarize(
                episode_id,
                transcript=text.transcript,
                description=text.description,
                language_code=language,
                user_id=user_id,
            )
            saved = None
            if user_id and not outcome.cached:
                try:
                    saved = await services.store.create(
                        user_id,
                        episode_id,
                        outcome.result,
                        EpisodeMetadata(description=text.description),
                    )
                except AlreadyExistsError:
                    saved = None
            return outcome, saved
        finally:
            await services.aclose()

    try:
        outcome, saved = asyncio.run(_run())
    except PodcastDigestError as e:
        raise click.ClickException(e.message)

    source = "transcript" if outcome.is_from_transcript else "description"
    subtitle = f"from {source}, {outcome.result.sentiment}" + (", cached" if outcome.cached else "")
    console.print(Panel(outcome.result.summary, title=f"Episode {episode_id}", subtitle=subtitle))
    for point in outcome.result.key_points:
        console.print(f"  [cyan]•[/cyan] {point}")
    if saved is not None:
        console.print(f"[green]✓ Saved summary: {saved.id}[/green]")


if __name__ == "__main__":
    cli()
