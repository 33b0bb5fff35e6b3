"""Error types raised while discovering and sampling datasets."""

from host_sampler.models import Dataset


class SamplerError(Exception):
    """Base class for all host sampler errors."""

    @property
    def kind(self) -> str:
        """Name of the error kind, used in diagnostics."""
        return type(self).__name__


class DiscoveryError(SamplerError):
    """The dataset catalog was unreachable or returned a malformed response."""


class InvalidSizeError(SamplerError):
    """A declared triple count is missing, non-positive or unparsable."""


class TransportError(SamplerError):
    """A fragment request failed or answered with a non-200 status."""

    def __init__(self, url: str, message: str, status_code: int | None = None) -> None:
        super().__init__(f"{message} for {url}")
        self.url = url
        self.status_code = status_code


class ParseError(SamplerError):
    """A fragment payload could not be parsed as TriG."""

    def __init__(self, url: str, message: str) -> None:
        super().__init__(f"Malformed RDF payload from {url}: {message}")
        self.url = url


class DatasetAnalysisError(SamplerError):
    """Sampling a single dataset failed.

    Wraps the underlying error so diagnostics can name both the failing
    dataset and the kind of failure.
    """

    def __init__(self, dataset: Dataset, cause: SamplerError) -> None:
        super().__init__(f"{dataset.endpoint}: {cause.kind}: {cause}")
        self.dataset = dataset
        self.cause = cause

    @property
    def kind(self) -> str:
        return self.cause.kind
