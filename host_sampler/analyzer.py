"""Sample the pages of fragment datasets and count referenced hosts."""

import asyncio
import logging
from collections.abc import Callable, Iterable
from dataclasses import replace

from rdflib import Literal, URIRef
from rdflib.namespace import VOID

from host_sampler.aggregation import FrequencyAggregator
from host_sampler.config import SamplingConfig
from host_sampler.errors import (
    DatasetAnalysisError,
    InvalidSizeError,
    ParseError,
    SamplerError,
    TransportError,
)
from host_sampler.models import Dataset, DatasetAnalysis
from host_sampler.sampling import sample_pages
from host_sampler.triple_stream import Triple, TripleStreamClient, page_url

logger = logging.getLogger(__name__)


def _first_error(group: BaseExceptionGroup) -> BaseException:
    """Earliest leaf exception of a (possibly nested) exception group."""
    first = group.exceptions[0]
    if isinstance(first, BaseExceptionGroup):
        return _first_error(first)
    return first


async def read_declared_triples(stream_client: TripleStreamClient, endpoint: str) -> int:
    """Read a fragment's triple count from its own metadata.

    Looks for ``<endpoint> void:triples n`` in any graph of the first page.

    Args:
        stream_client: Client used to fetch the fragment
        endpoint: Fragment URL

    Returns:
        The declared triple count

    Raises:
        InvalidSizeError: If the metadata triple is missing or not a positive integer
        TransportError: If the fragment could not be fetched
        ParseError: If the fragment is not valid TriG
    """
    subject = URIRef(endpoint)
    count: Literal | None = None
    async for event in stream_client.stream(endpoint):
        if (
            count is None
            and isinstance(event, Triple)
            and event.subject == subject
            and event.predicate == VOID.triples
        ):
            count = event.object

    if count is None:
        msg = f"No void:triples metadata for {endpoint}"
        raise InvalidSizeError(msg)
    try:
        declared = int(str(count))
    except ValueError:
        msg = f"Unparsable triple count {str(count)!r} for {endpoint}"
        raise InvalidSizeError(msg) from None
    if declared <= 0:
        msg = f"Non-positive triple count {declared} for {endpoint}"
        raise InvalidSizeError(msg)
    return declared


class DatasetAnalyzer:
    """Estimate the host distribution of one dataset from sampled pages."""

    def __init__(
        self,
        stream_client: TripleStreamClient,
        config: SamplingConfig | None = None,
        progress_fn: Callable[[str], None] | None = None,
    ) -> None:
        """Initialize the analyzer.

        Args:
            stream_client: Client used for every fragment request
            config: Sampling ratio and page size (defaults if None)
            progress_fn: Optional callback for progress reporting, receives a message string
        """
        self.stream_client = stream_client
        self.config = config or SamplingConfig()
        self.progress_fn = progress_fn

    def _log(self, msg: str) -> None:
        if self.progress_fn:
            self.progress_fn(msg)

    async def analyze(self, dataset: Dataset) -> DatasetAnalysis:
        """Sample a dataset and count the hosts of its IRIs.

        The triple count is read from the fragment metadata, which is
        authoritative for both the page range and the returned dataset
        record. Pages are fetched concurrently; the first failing page
        cancels the others.

        Args:
            dataset: Dataset to sample

        Returns:
            The dataset (with the fragment's triple count) and its host counts

        Raises:
            DatasetAnalysisError: Wrapping the first size, transport or parse error
        """
        try:
            return await self._analyze(dataset)
        except (InvalidSizeError, TransportError, ParseError) as e:
            raise DatasetAnalysisError(dataset, e) from e

    async def _analyze(self, dataset: Dataset) -> DatasetAnalysis:
        declared = await read_declared_triples(self.stream_client, dataset.endpoint)
        if dataset.declared_triples > 0 and declared != dataset.declared_triples:
            logger.warning(
                "Catalog declares %d triples for %s but the fragment declares %d; using %d",
                dataset.declared_triples,
                dataset.endpoint,
                declared,
                declared,
            )

        pages = sample_pages(declared, self.config.page_size, self.config.sampling_ratio)
        self._log(f"Sampling {len(pages)} page(s) of {dataset.endpoint} ({declared:,} triples)")

        aggregator = FrequencyAggregator(len(pages))
        try:
            async with asyncio.TaskGroup() as tg:
                for page in pages:
                    tg.create_task(self._sample_page(page_url(dataset.endpoint, page), aggregator))
        except ExceptionGroup as group:
            raise _first_error(group) from None

        counts = aggregator.result()
        self._log(f"  {dataset.endpoint}: {len(counts)} distinct host(s)")
        return DatasetAnalysis(replace(dataset, declared_triples=declared), counts)

    async def _sample_page(self, url: str, aggregator: FrequencyAggregator) -> None:
        logger.debug("Sampling %s", url)
        try:
            async for event in self.stream_client.stream(url):
                aggregator.feed(event)
        except SamplerError as e:
            aggregator.fail(e)
            raise


async def analyze_all(analyzer: DatasetAnalyzer, datasets: Iterable[Dataset]) -> list[DatasetAnalysis]:
    """Analyze all datasets concurrently, failing as a whole on the first error.

    Returns:
        One analysis per dataset, in input order

    Raises:
        DatasetAnalysisError: For the first dataset that failed
    """
    try:
        async with asyncio.TaskGroup() as tg:
            tasks = [tg.create_task(analyzer.analyze(dataset)) for dataset in datasets]
    except ExceptionGroup as group:
        raise _first_error(group) from None
    return [task.result() for task in tasks]


async def analyze_each(
    analyzer: DatasetAnalyzer, datasets: Iterable[Dataset]
) -> tuple[list[DatasetAnalysis], list[DatasetAnalysisError]]:
    """Analyze all datasets concurrently, collecting failures instead of aborting.

    Returns:
        Successful analyses and per-dataset failures, both in input order
    """
    results = await asyncio.gather(
        *(analyzer.analyze(dataset) for dataset in datasets), return_exceptions=True
    )
    analyses: list[DatasetAnalysis] = []
    failures: list[DatasetAnalysisError] = []
    for result in results:
        if isinstance(result, DatasetAnalysisError):
            failures.append(result)
        elif isinstance(result, BaseException):
            raise result
        else:
            analyses.append(result)
    return analyses, failures
