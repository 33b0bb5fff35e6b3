"""Records passed between discovery, sampling and merging."""

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, TypeAlias

# Hostname -> number of IRI occurrences
HostCountMap: TypeAlias = dict[str, int]


@dataclass(frozen=True)
class Dataset:
    """A paginated triple-fragment dataset to sample.

    Attributes:
        endpoint: URL of the fragment resource (page 1 without a page parameter)
        source_url: URL of the document the dataset was built from
        declared_triples: Number of triples the dataset claims to contain
    """

    endpoint: str
    source_url: str
    declared_triples: int

    def to_json(self) -> dict[str, Any]:
        """Provenance record as it appears in the JSON output."""
        return {
            "endpoint": self.endpoint,
            "sourceURL": self.source_url,
            "declaredTriples": self.declared_triples,
        }


@dataclass(frozen=True)
class DatasetAnalysis:
    """Host occurrences sampled from one dataset."""

    dataset: Dataset
    host_occurrences: HostCountMap

    def to_json(self) -> dict[str, Any]:
        return {**self.dataset.to_json(), "hostOccurrences": dict(self.host_occurrences)}


@dataclass(frozen=True)
class ProcessedDataset:
    """A dataset attributed to its dominant host.

    ``referenced_hosts`` never contains ``most_occurring_host``.
    """

    most_occurring_host: str
    provenance: Dataset
    referenced_hosts: HostCountMap


@dataclass
class MergedProvider:
    """All datasets sharing one dominant host."""

    triples: int = 0
    provenance: list[Dataset] = field(default_factory=list)
    referenced_hosts: dict[str, int] = field(default_factory=lambda: defaultdict(int))

    def add(self, processed: ProcessedDataset) -> None:
        """Accumulate one processed dataset into this provider.

        Triple counts and host counts are summed, provenance is appended in
        call order.

        Args:
            processed: Dataset whose dominant host is this provider
        """
        self.triples += processed.provenance.declared_triples
        self.provenance.append(processed.provenance)
        for host, count in processed.referenced_hosts.items():
            self.referenced_hosts[host] += count

    def to_json(self) -> dict[str, Any]:
        return {
            "triples": self.triples,
            "provenance": [dataset.to_json() for dataset in self.provenance],
            "referencedHosts": dict(self.referenced_hosts),
        }
