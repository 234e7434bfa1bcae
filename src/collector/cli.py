"""CLI interface using typer."""

import asyncio
import logging
from contextlib import ExitStack

import typer

from .collector import Collector
from .config import settings
from .errors import CollectorError
from .http import HTMLElement, Response
from .output import StreamingOutputWriter

app = typer.Typer(
    name="collector",
    help="Callback-driven web collector",
    no_args_is_help=True,
)


async def _crawl(
    start_url: str,
    max_depth: int,
    selector: str,
    attr: str,
    user_agent: str,
    cookies: bool,
    writer: StreamingOutputWriter | None,
) -> Collector:
    """Crawl from start_url, following `attr` of every `selector` match."""
    collector = Collector(user_agent=user_agent, max_depth=max_depth)
    if not cookies:
        collector.disable_cookies()

    @collector.on_html(selector)
    def follow(element: HTMLElement):
        link = element.attr(attr)
        if link:
            element.request.spawn(link)

    @collector.on_response
    def report(response: Response):
        request = response.request
        typer.echo(f"[{response.status_code}] {request.url} (depth {request.depth})")
        if writer is not None:
            writer.write(response)

    async with collector:
        try:
            await collector.visit(start_url)
        finally:
            await collector.wait()
    return collector


@app.command()
def crawl(
    start_url: str = typer.Argument(..., help="Starting URL for crawl"),
    max_depth: int = typer.Option(settings.max_depth, "--max-depth", "-d", help="Maximum link depth (0 = unlimited)"),
    selector: str = typer.Option("a[href]", "--selector", "-s", help="CSS selector of elements to follow"),
    attr: str = typer.Option("href", "--attr", "-a", help="Attribute holding the URL to follow"),
    user_agent: str = typer.Option(settings.user_agent, "--user-agent", help="User-Agent header"),
    cookies: bool = typer.Option(True, "--cookies/--no-cookies", help="Keep cookies between requests"),
    output: str = typer.Option(None, "-o", "--output", help="Output file (JSONL)"),
    include_content: bool = typer.Option(False, "--include-content", help="Store page bodies in the output"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Show debug logging"),
):
    """Crawl a website starting from a URL."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    with ExitStack() as stack:
        writer = None
        if output:
            writer = stack.enter_context(StreamingOutputWriter(output, include_content=include_content))

        try:
            collector = asyncio.run(_crawl(
                start_url=start_url,
                max_depth=max_depth,
                selector=selector,
                attr=attr,
                user_agent=user_agent,
                cookies=cookies,
                writer=writer,
            ))
        except CollectorError as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(code=1)

    typer.echo(f"\nVisited {len(collector.visited_urls)} URLs")
    if writer is not None:
        typer.echo(f"Saved {writer.count} records to {output}")


@app.command()
def version():
    """Show version."""
    from . import __version__

    typer.echo(f"web-collector {__version__}")


if __name__ == "__main__":
    app()
