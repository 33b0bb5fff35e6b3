"""Runtime configuration for sampling and discovery."""

DEFAULT_SAMPLING_RATIO = 0.5
DEFAULT_PAGE_SIZE = 100
DEFAULT_TIMEOUT = 30.0

DEFAULT_CATALOG_URL = "http://lodlaundromat.org/sparql/"
DEFAULT_FRAGMENTS_URL = "http://ldf.lodlaundromat.org/"
DEFAULT_LIMIT = 10


class SamplingConfig:
    """How much of each dataset to fetch."""

    def __init__(
        self,
        sampling_ratio: float = DEFAULT_SAMPLING_RATIO,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        """Initialize and validate the sampling configuration.

        Args:
            sampling_ratio: Fraction of pages to fetch per dataset, in (0, 1]
            page_size: Triples per page served by the fragment interface

        Raises:
            ValueError: If either value is out of range
        """
        if not 0 < sampling_ratio <= 1:
            msg = f"Sampling ratio must be in (0, 1], got {sampling_ratio}"
            raise ValueError(msg)
        if page_size < 1:
            msg = f"Page size must be positive, got {page_size}"
            raise ValueError(msg)
        self.sampling_ratio = sampling_ratio
        self.page_size = page_size

    def __repr__(self) -> str:
        return f"SamplingConfig(sampling_ratio={self.sampling_ratio!r}, page_size={self.page_size!r})"


class DiscoveryConfig:
    """Where and how to look up candidate datasets."""

    def __init__(
        self,
        catalog_url: str = DEFAULT_CATALOG_URL,
        fragments_url: str = DEFAULT_FRAGMENTS_URL,
        limit: int = DEFAULT_LIMIT,
        min_triples: int = 0,
        max_triples: int | None = None,
    ) -> None:
        """Initialize discovery configuration.

        Args:
            catalog_url: SPARQL endpoint of the dataset catalog
            fragments_url: Base URL the dataset hash is appended to
            limit: Maximum number of datasets to return
            min_triples: Only datasets with strictly more triples are returned
            max_triples: Only datasets with strictly fewer triples are returned (None for no bound)
        """
        if limit < 1:
            msg = f"Limit must be positive, got {limit}"
            raise ValueError(msg)
        self.catalog_url = catalog_url
        self.fragments_url = fragments_url if fragments_url.endswith("/") else fragments_url + "/"
        self.limit = limit
        self.min_triples = min_triples
        self.max_triples = max_triples
