"""
Command line entry point for running the harness.
"""
from __future__ import annotations

import dataclasses
import json
import logging
import sys
from pathlib import Path

import click

from newsqa.browser import BrowserCtx
from newsqa.config_loader import load_selectors
from newsqa.errors import InvalidInputError
from newsqa.pages.hacker_news import HackerNewsPage
from newsqa.report import Reporter, validation_to_dict
from newsqa.runner import run_suite
from newsqa.settings import load_settings
from newsqa.validators import ArticleValidator


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@click.group()
def cli():
    pass


@cli.command()
@click.option("--report", "report_path", type=click.Path(dir_okay=False, path_type=Path), default=None)
@click.option("--headed", is_flag=True, help="Show the browser window.")
@click.option("--browser", type=click.Choice(["chromium", "firefox", "webkit"]), default=None)
@click.option("--verbose", is_flag=True)
def run(report_path, headed, browser, verbose):
    """Run the whole suite against the listing and write a JSON report."""
    _configure_logging(verbose)
    settings = load_settings()
    if headed:
        settings = dataclasses.replace(settings, headless=False)
    if browser:
        settings = dataclasses.replace(settings, browser=browser)

    reporter = Reporter(target=settings.base_url)
    report = run_suite(settings, selectors=load_selectors(), reporter=reporter)
    reporter.write(report_path or settings.report_path)

    click.echo(
        f"Total: {report.summary.total}, Passed: {report.summary.passed}, "
        f"Failed: {report.summary.failed}, Pass Rate: {report.summary.pass_rate}"
    )
    for step in report.details:
        if step.status == "failed":
            click.echo(f"  [FAIL] {step.name}: {step.error}")
    sys.exit(0 if report.summary.failed == 0 else 1)


@cli.command()
@click.option("--count", type=click.IntRange(min=1), default=None, help="Number of items to collect.")
@click.option("--verbose", is_flag=True)
def sorting(count, verbose):
    """Collect the listing and print the full validation result as JSON."""
    _configure_logging(verbose)
    settings = load_settings()
    expected = count if count is not None else settings.expected_item_count
    validator = ArticleValidator(
        expected_count=expected,
        time_threshold_minutes=settings.staleness_threshold_minutes,
        max_workers=settings.validation_workers,
    )
    with BrowserCtx(engine=settings.browser, headless=settings.headless) as ctx:
        hn = HackerNewsPage(ctx.new_page(), settings, load_selectors())
        items = hn.collect_items(expected)
    try:
        result = validator.perform_full_validation(items)
    except InvalidInputError as exc:
        raise click.ClickException(f"No listing items collected from {settings.base_url}: {exc}") from exc
    click.echo(json.dumps(validation_to_dict(result), indent=2, ensure_ascii=False))
    sys.exit(0 if result.is_fully_valid else 1)


if __name__ == "__main__":  # pragma: no cover
    cli()
