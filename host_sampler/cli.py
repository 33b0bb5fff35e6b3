"""Command-line interface for host-sampler."""

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

import click
import httpx

from host_sampler import config as defaults
from host_sampler.analyzer import DatasetAnalyzer, analyze_all, analyze_each
from host_sampler.config import DiscoveryConfig, SamplingConfig
from host_sampler.discovery import DatasetDiscovery
from host_sampler.errors import DatasetAnalysisError, SamplerError
from host_sampler.merger import merge, to_json_dict
from host_sampler.models import Dataset
from host_sampler.triple_stream import TripleStreamClient

ENV_PREFIX = "HOST_SAMPLER_"


def _make_client(timeout: float) -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=timeout, follow_redirects=True)


def _describe(error: SamplerError) -> str:
    """One-line diagnostic naming the dataset (if any) and the error kind."""
    if isinstance(error, DatasetAnalysisError):
        return str(error)
    return f"{error.kind}: {error}"


def _progress(msg: str) -> None:
    click.echo(msg, err=True)


async def _run(
    sampling: SamplingConfig,
    discovery: DiscoveryConfig,
    endpoints: tuple[str, ...],
    timeout: float,
    keep_going: bool,
    raw: bool,
) -> dict[str, Any] | list[dict[str, Any]]:
    async with _make_client(timeout) as client:
        if endpoints:
            # Size is unknown until the fragment metadata is read
            datasets = [Dataset(endpoint, endpoint, 0) for endpoint in endpoints]
        else:
            _progress(f"Discovering datasets from {discovery.catalog_url}...")
            datasets = await DatasetDiscovery(client, discovery).discover()
            _progress(f"  Found {len(datasets)} dataset(s)")

        analyzer = DatasetAnalyzer(TripleStreamClient(client), sampling, progress_fn=_progress)
        if keep_going:
            analyses, failures = await analyze_each(analyzer, datasets)
            for failure in failures:
                click.echo(f"Failed: {_describe(failure)}", err=True)
        else:
            analyses = await analyze_all(analyzer, datasets)

    if raw:
        return [analysis.to_json() for analysis in analyses]
    return to_json_dict(merge(analyses))


@click.command()
@click.option(
    "--sampling-ratio",
    type=click.FloatRange(0, 1, min_open=True),
    default=defaults.DEFAULT_SAMPLING_RATIO,
    show_default=True,
    envvar=f"{ENV_PREFIX}SAMPLING_RATIO",
    help="Fraction of pages to fetch per dataset",
)
@click.option(
    "--page-size",
    type=click.IntRange(min=1),
    default=defaults.DEFAULT_PAGE_SIZE,
    show_default=True,
    envvar=f"{ENV_PREFIX}PAGE_SIZE",
    help="Triples per page served by the fragment server",
)
@click.option(
    "--catalog-url",
    default=defaults.DEFAULT_CATALOG_URL,
    show_default=True,
    envvar=f"{ENV_PREFIX}CATALOG_URL",
    help="SPARQL endpoint used to discover datasets",
)
@click.option(
    "--fragments-url",
    default=defaults.DEFAULT_FRAGMENTS_URL,
    show_default=True,
    envvar=f"{ENV_PREFIX}FRAGMENTS_URL",
    help="Base URL of the fragment server",
)
@click.option(
    "--limit",
    type=click.IntRange(min=1),
    default=defaults.DEFAULT_LIMIT,
    show_default=True,
    envvar=f"{ENV_PREFIX}LIMIT",
    help="Number of datasets to discover",
)
@click.option(
    "--min-triples",
    type=click.IntRange(min=0),
    default=0,
    show_default=True,
    help="Only discover datasets with more triples than this",
)
@click.option(
    "--max-triples",
    type=click.IntRange(min=1),
    default=None,
    help="Only discover datasets with fewer triples than this",
)
@click.option(
    "--endpoint",
    "endpoints",
    multiple=True,
    help="Sample this fragment endpoint instead of discovering datasets (repeatable)",
)
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=defaults.DEFAULT_TIMEOUT,
    show_default=True,
    envvar=f"{ENV_PREFIX}TIMEOUT",
    help="HTTP timeout in seconds",
)
@click.option(
    "--keep-going",
    is_flag=True,
    default=False,
    help="Report failing datasets and merge the remaining ones instead of aborting",
)
@click.option(
    "--raw",
    is_flag=True,
    default=False,
    help="Output per-dataset host occurrences instead of merged providers",
)
@click.option(
    "-o",
    "--output",
    type=click.Path(path_type=Path),
    default=None,
    help="Output file for the JSON result (default: stdout)",
)
@click.option("-v", "--verbose", is_flag=True, default=False, help="Enable debug logging")
def main(
    sampling_ratio: float,
    page_size: int,
    catalog_url: str,
    fragments_url: str,
    limit: int,
    min_triples: int,
    max_triples: int | None,
    endpoints: tuple[str, ...],
    timeout: float,
    keep_going: bool,
    raw: bool,
    output: Path | None,
    verbose: bool,
) -> None:
    """Estimate which host each Linked Data Fragments dataset mostly references.

    Samples an evenly spread subset of each dataset's pages, counts the
    hosts of all IRIs found, and merges datasets sharing a dominant host
    into one provider entry. The result is written as JSON.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    sampling = SamplingConfig(sampling_ratio=sampling_ratio, page_size=page_size)
    discovery = DiscoveryConfig(
        catalog_url=catalog_url,
        fragments_url=fragments_url,
        limit=limit,
        min_triples=min_triples,
        max_triples=max_triples,
    )

    try:
        result = asyncio.run(_run(sampling, discovery, endpoints, timeout, keep_going, raw))
    except SamplerError as e:
        click.echo(f"Error: {_describe(e)}", err=True)
        sys.exit(1)

    with click.open_file(str(output) if output else "-", "w") as f:
        json.dump(result, f, indent=2)
        f.write("\n")
    if output:
        _progress(f"Wrote output to: {output}")


if __name__ == "__main__":
    main()
