"""Look up candidate datasets in the LOD Laundromat catalog."""

import logging
from collections.abc import Mapping
from typing import Any

import httpx

from host_sampler.config import DiscoveryConfig
from host_sampler.errors import DiscoveryError
from host_sampler.models import Dataset

logger = logging.getLogger(__name__)

SPARQL_RESULTS_JSON = "application/sparql-results+json"

QUERY_TEMPLATE = """\
PREFIX llo: <http://lodlaundromat.org/ontology/>
SELECT ?md5 ?doc ?triples {{
  [] llo:triples ?triples ;
     llo:url ?doc ;
     llo:md5 ?md5 .
  {filters}
}}
ORDER BY DESC(?triples)
LIMIT {limit}
"""


def build_query(config: DiscoveryConfig) -> str:
    """SPARQL query selecting the largest datasets within the configured bounds."""
    filters = [f"FILTER(?triples > {config.min_triples})"]
    if config.max_triples is not None:
        filters.append(f"FILTER(?triples < {config.max_triples})")
    return QUERY_TEMPLATE.format(filters="\n  ".join(filters), limit=config.limit)


def parse_bindings(results: Mapping[str, Any], fragments_url: str) -> list[Dataset]:
    """Convert SPARQL JSON results into datasets.

    Args:
        results: Decoded ``application/sparql-results+json`` document
        fragments_url: Base URL of the fragment server, ending in ``/``

    Returns:
        Datasets in result order

    Raises:
        DiscoveryError: If a binding is missing a field or has a non-integer count
    """
    try:
        bindings = results["results"]["bindings"]
    except (KeyError, TypeError) as e:
        msg = f"Malformed SPARQL results: missing {e}"
        raise DiscoveryError(msg) from e

    if not isinstance(bindings, list):
        msg = f"Malformed SPARQL results: bindings is {type(bindings).__name__}, not a list"
        raise DiscoveryError(msg)

    datasets = []
    for binding in bindings:
        try:
            datasets.append(
                Dataset(
                    endpoint=fragments_url + binding["md5"]["value"],
                    source_url=binding["doc"]["value"],
                    declared_triples=int(binding["triples"]["value"]),
                )
            )
        except (KeyError, TypeError, ValueError) as e:
            msg = f"Malformed binding {binding!r}: {e}"
            raise DiscoveryError(msg) from e
    return datasets


class DatasetDiscovery:
    """Queries the catalog's SPARQL endpoint for datasets to sample."""

    def __init__(self, client: httpx.AsyncClient, config: DiscoveryConfig | None = None) -> None:
        """Initialize discovery.

        Args:
            client: HTTP client used for the catalog request
            config: Catalog location and result bounds (defaults if None)
        """
        self.client = client
        self.config = config or DiscoveryConfig()

    async def discover(self) -> list[Dataset]:
        """Fetch candidate datasets, largest first.

        Raises:
            DiscoveryError: If the catalog is unreachable or answers unexpectedly
        """
        url = self.config.catalog_url
        try:
            response = await self.client.post(
                url,
                data={"query": build_query(self.config)},
                headers={"Accept": SPARQL_RESULTS_JSON},
            )
        except httpx.HTTPError as e:
            msg = f"Catalog {url} unreachable ({type(e).__name__}: {e})"
            raise DiscoveryError(msg) from e

        if response.status_code != 200:
            msg = f"Status code {response.status_code} while retrieving datasets from {url}"
            raise DiscoveryError(msg)
        try:
            results = response.json()
        except ValueError as e:
            msg = f"Catalog {url} did not return JSON: {e}"
            raise DiscoveryError(msg) from e

        datasets = parse_bindings(results, self.config.fragments_url)
        logger.info("Discovered %d dataset(s) from %s", len(datasets), url)
        return datasets
