"""Per-dataset host frequency aggregation."""

import logging
from collections import defaultdict
from enum import Enum

from host_sampler.errors import SamplerError
from host_sampler.hosts import extract_host
from host_sampler.models import HostCountMap
from host_sampler.triple_stream import EndOfStream, StreamEvent, Triple

logger = logging.getLogger(__name__)


class AggregatorState(Enum):
    """Lifecycle of a :class:`FrequencyAggregator`."""

    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class FrequencyAggregator:
    """Count host occurrences over all sampled pages of one dataset.

    Each page feeds its triples followed by one end-of-stream marker. Once
    every page has ended the aggregator is COMPLETED; the first error on any
    page makes it FAILED. Both states are terminal and later events are
    ignored.
    """

    def __init__(self, pages_to_sample: int) -> None:
        """Initialize the aggregator.

        Args:
            pages_to_sample: Number of page streams that will report an end
        """
        if pages_to_sample < 1:
            msg = f"At least one page must be sampled, got {pages_to_sample}"
            raise ValueError(msg)
        self.remaining_pages = pages_to_sample
        self.counts: dict[str, int] = defaultdict(int)
        self.state = AggregatorState.RUNNING
        self.error: SamplerError | None = None

    @property
    def completed(self) -> bool:
        return self.state is AggregatorState.COMPLETED

    @property
    def failed(self) -> bool:
        return self.state is AggregatorState.FAILED

    def feed(self, event: StreamEvent) -> None:
        """Dispatch one stream event."""
        if isinstance(event, EndOfStream):
            self.end_page()
        else:
            self.add_triple(event)

    def add_triple(self, triple: Triple) -> None:
        """Count the hosts of a data triple.

        Subject, predicate and object are counted independently, so a host
        appearing twice in one triple counts twice. Triples from named graphs
        are fragment metadata and are skipped.
        """
        if self.state is not AggregatorState.RUNNING or triple.graph != "":
            return
        for term in (triple.subject, triple.predicate, triple.object):
            host = extract_host(term)
            if host is not None:
                self.counts[host] += 1

    def end_page(self) -> None:
        """Record that one page stream has ended."""
        if self.state is not AggregatorState.RUNNING:
            return
        self.remaining_pages -= 1
        if self.remaining_pages == 0:
            self.state = AggregatorState.COMPLETED
            logger.debug("Aggregation completed with %d hosts", len(self.counts))

    def fail(self, error: SamplerError) -> None:
        """Fail the aggregation. Only the first error is kept."""
        if self.state is not AggregatorState.RUNNING:
            return
        self.state = AggregatorState.FAILED
        self.error = error

    def result(self) -> HostCountMap:
        """Final host counts.

        Raises:
            SamplerError: The recorded error, if the aggregation failed
            RuntimeError: If pages are still outstanding
        """
        if self.error is not None:
            raise self.error
        if not self.completed:
            msg = f"Aggregation still waiting for {self.remaining_pages} page(s)"
            raise RuntimeError(msg)
        return dict(self.counts)
