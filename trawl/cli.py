"""trawl CLI: resolve index links and run simple scrapes.

Usage:
    trawl links http://example.com/list --selector '//a'      # Print instance URLs
    trawl scrape http://example.com/list --selector '//a' --list '//h1'
    trawl scrape --url http://example.com/a --table '//table' --csv out.csv
    trawl stash-key http://example.com/a                       # Where a page is stashed
"""

from __future__ import annotations

import json
import logging
from typing import Any

import click

from trawl.common.cache import PageCache
from trawl.common.exceptions import TrawlException
from trawl.config import ScraperConfig
from trawl.data_types import SelectorMethod, cache_key
from trawl.index import Index
from trawl.scraper import Scraper
from trawl.utils import list_items, table


def _configure_logging(verbose: bool) -> None:
    log_level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _selector_method(css: bool) -> SelectorMethod:
    return SelectorMethod.CSS if css else SelectorMethod.XPATH


def _common_options(func: Any) -> Any:
    """Options shared by every command that fetches pages."""
    options = [
        click.option(
            "--delay",
            type=click.FloatRange(min=0),
            default=30.0,
            show_default=True,
            help="Seconds to wait before each network request.",
        ),
        click.option(
            "--stash-folder",
            type=click.Path(file_okay=False),
            default="stashes",
            show_default=True,
            help="Directory for stashed pages.",
        ),
        click.option(
            "--timeout",
            type=click.FloatRange(min=0, min_open=True),
            default=None,
            help="HTTP timeout in seconds (default: none).",
        ),
        click.option(
            "--css",
            is_flag=True,
            help="Selectors are CSS instead of XPath.",
        ),
        click.option("-v", "--verbose", is_flag=True, help="Verbose logging."),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group()
@click.version_option(package_name="trawl")
def cli() -> None:
    """Index-and-instance scraping from the command line."""


@cli.command()
@click.argument("index_url")
@click.option(
    "--selector", required=True, help="Selector for instance links."
)
@click.option(
    "--stash/--no-stash",
    default=False,
    show_default=True,
    help="Stash index pages.",
)
@click.option(
    "--absolute",
    is_flag=True,
    help="Resolve relative links against the index URL.",
)
@_common_options
def links(
    index_url: str,
    selector: str,
    stash: bool,
    absolute: bool,
    delay: float,
    stash_folder: str,
    timeout: float | None,
    css: bool,
    verbose: bool,
) -> None:
    """Print the instance URLs listed on INDEX_URL, one per line."""
    _configure_logging(verbose)
    config = ScraperConfig(
        verbose=verbose,
        index_debug=stash,
        sleep_time_between_requests=delay,
        stash_folder=stash_folder,
        timeout=timeout,
        resolve_relative_links=absolute,
    )
    with Index(index_url, selector, _selector_method(css), config=config) as index:
        try:
            urls = index.get_index()
        except TrawlException as e:
            raise click.ClickException(str(e)) from e
    for url in urls:
        click.echo(url)


@cli.command()
@click.argument("index_url", required=False)
@click.option("--selector", help="Selector for instance links on INDEX_URL.")
@click.option(
    "--url",
    "urls",
    multiple=True,
    help="Instance URL to scrape (repeatable). Used instead of INDEX_URL.",
)
@click.option(
    "--list",
    "list_selector",
    help="Extract the text of every element matching this selector.",
)
@click.option(
    "--table",
    "table_selector",
    help="Extract the rows of the table matching this selector.",
)
@click.option(
    "--csv",
    "csv_path",
    type=click.Path(dir_okay=False),
    help="Write one CSV row per instance instead of JSON lines.",
)
@click.option(
    "--stash/--no-stash",
    default=True,
    show_default=True,
    help="Stash instance pages.",
)
@click.option(
    "--stash-index",
    is_flag=True,
    help="Stash index pages too.",
)
@click.option(
    "--max-pages",
    type=click.IntRange(min=1),
    default=None,
    help="Stop following pagination after this many pages.",
)
@click.option(
    "--absolute",
    is_flag=True,
    help="Resolve relative links against the index URL.",
)
@_common_options
def scrape(
    index_url: str | None,
    selector: str | None,
    urls: tuple[str, ...],
    list_selector: str | None,
    table_selector: str | None,
    csv_path: str | None,
    stash: bool,
    stash_index: bool,
    max_pages: int | None,
    absolute: bool,
    delay: float,
    stash_folder: str,
    timeout: float | None,
    css: bool,
    verbose: bool,
) -> None:
    """Scrape instances from INDEX_URL or from --url options.

    \b
    Examples:
        trawl scrape http://example.com/list --selector '//a' --list '//h1'
        trawl scrape --url http://example.com/a --table '//table' --csv out.csv
    """
    if bool(index_url) == bool(urls):
        raise click.UsageError("Give either INDEX_URL or one or more --url.")
    if index_url and not selector:
        raise click.UsageError("--selector is required with INDEX_URL.")
    if bool(list_selector) == bool(table_selector):
        raise click.UsageError("Give exactly one of --list or --table.")

    _configure_logging(verbose)
    config = ScraperConfig(
        verbose=verbose,
        debug=stash,
        index_debug=stash_index,
        sleep_time_between_requests=delay,
        stash_folder=stash_folder,
        timeout=timeout,
        max_pages=max_pages,
        resolve_relative_links=absolute,
    )
    method = _selector_method(css)
    if table_selector:
        process: Any = table(table_selector, method)
    else:
        process = list_items(list_selector or "", method)

    source: Any = index_url if index_url else list(urls)
    with Scraper(source, selector, method.value, config=config) as scraper:
        try:
            if csv_path:
                records = scraper.scrape_to_csv(csv_path, process)
                click.echo(f"Wrote {len(records)} rows to {csv_path}")
                return
            records = scraper.scrape(process)
        except TrawlException as e:
            raise click.ClickException(str(e)) from e

    for url, record in zip(scraper.instance_urls, records):
        click.echo(json.dumps({"url": url, "record": record}))


@cli.command("stash-key")
@click.argument("url")
@click.option(
    "--stash-folder",
    type=click.Path(file_okay=False),
    default="stashes",
    show_default=True,
    help="Directory for stashed pages.",
)
def stash_key(url: str, stash_folder: str) -> None:
    """Print the stash file path for URL and whether it exists."""
    cache = PageCache(stash_folder)
    key = cache_key(url)
    path = cache.path_for(key)
    status = "stashed" if key and path.is_file() else "missing"
    click.echo(f"{path}\t{status}")


if __name__ == "__main__":
    cli()
