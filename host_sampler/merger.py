"""Attribute datasets to their dominant host and merge them per provider."""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from host_sampler.models import DatasetAnalysis, HostCountMap, MergedProvider, ProcessedDataset

logger = logging.getLogger(__name__)


def select_dominant(host_occurrences: Mapping[str, int]) -> str | None:
    """Host with the highest count.

    Ties go to the lexicographically smallest host, so the result does not
    depend on the order in which sampled pages arrived.

    Returns:
        The dominant host, or None for an empty map
    """
    if not host_occurrences:
        return None
    return min(host_occurrences, key=lambda host: (-host_occurrences[host], host))


def process_analysis(analysis: DatasetAnalysis) -> ProcessedDataset | None:
    """Split an analysis into its dominant host and the remaining references.

    Returns:
        The processed dataset, or None if no IRI with a host was sampled
    """
    dominant = select_dominant(analysis.host_occurrences)
    if dominant is None:
        logger.warning("No hosts sampled from %s; skipping", analysis.dataset.endpoint)
        return None
    referenced: HostCountMap = {
        host: count for host, count in analysis.host_occurrences.items() if host != dominant
    }
    return ProcessedDataset(dominant, analysis.dataset, referenced)


def merge(analyses: Iterable[DatasetAnalysis]) -> dict[str, MergedProvider]:
    """Merge datasets that share a dominant host into one provider each.

    Triple counts and referenced host counts are summed, so the result does
    not depend on input order except for the order of each provider's
    provenance list, which follows the input.

    Args:
        analyses: Per-dataset analyses

    Returns:
        Mapping from dominant host to merged provider, in order of first appearance
    """
    providers: dict[str, MergedProvider] = {}
    for analysis in analyses:
        processed = process_analysis(analysis)
        if processed is None:
            continue
        provider = providers.get(processed.most_occurring_host)
        if provider is None:
            provider = providers[processed.most_occurring_host] = MergedProvider()
        provider.add(processed)
    return providers


def to_json_dict(providers: Mapping[str, MergedProvider]) -> dict[str, Any]:
    """Merged providers as a JSON-serializable mapping."""
    return {host: provider.to_json() for host, provider in providers.items()}
