"""Fetch fragment pages and stream their triples."""

import logging
from collections.abc import AsyncIterator, Iterator
from typing import NamedTuple, TypeAlias

import httpx
from rdflib import BNode, Dataset, Literal, URIRef
from rdflib.graph import DATASET_DEFAULT_GRAPH_ID

from host_sampler.errors import ParseError, TransportError

logger = logging.getLogger(__name__)

# Type alias for RDF terms
RDFTerm: TypeAlias = URIRef | Literal | BNode

TRIG_MEDIA_TYPE = "application/trig"


class Triple(NamedTuple):
    """A triple together with the name of the graph it was served in.

    ``graph`` is ``""`` for the default graph, which holds the data. Named
    graphs carry fragment metadata and controls.
    """

    subject: RDFTerm
    predicate: RDFTerm
    object: RDFTerm
    graph: str = ""


class EndOfStream:
    """Marker yielded once after the last triple of a page."""

    _instance: "EndOfStream | None" = None

    def __new__(cls) -> "EndOfStream":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "END_OF_STREAM"


END_OF_STREAM = EndOfStream()

StreamEvent: TypeAlias = Triple | EndOfStream


def page_url(endpoint: str, page: int) -> str:
    """URL of page ``page`` of the fragment at ``endpoint``."""
    return str(httpx.URL(endpoint).copy_set_param("page", page))


def parse_trig(body: str, url: str) -> Iterator[Triple]:
    """Parse a TriG document into triples.

    Args:
        body: Serialized TriG payload
        url: URL the payload was fetched from, used in error messages

    Yields:
        Triples of every graph in the payload

    Raises:
        ParseError: If the payload is not valid TriG
    """
    dataset = Dataset()
    try:
        dataset.parse(data=body, format="trig")
    except Exception as e:
        raise ParseError(url, str(e)) from e

    for graph in dataset.graphs():
        name = "" if graph.identifier == DATASET_DEFAULT_GRAPH_ID else str(graph.identifier)
        for subject, predicate, obj in graph:
            yield Triple(subject, predicate, obj, name)


class TripleStreamClient:
    """Streams the triples of fragment pages over HTTP.

    One request is made per call to :meth:`stream`, without retries or
    caching. The HTTP client is owned by the caller.
    """

    def __init__(self, client: httpx.AsyncClient, accept: str = TRIG_MEDIA_TYPE) -> None:
        """Initialize the stream client.

        Args:
            client: HTTP client used for every request
            accept: Media type requested from the fragment server
        """
        self.client = client
        self.accept = accept

    async def fetch(self, url: str) -> str:
        """Fetch the body of a fragment page.

        Raises:
            TransportError: On connection failure or a status other than 200
        """
        try:
            response = await self.client.get(url, headers={"Accept": self.accept})
        except httpx.InvalidURL as e:
            raise TransportError(url, f"Invalid URL ({e})") from e
        except httpx.HTTPError as e:
            raise TransportError(url, f"Request failed ({type(e).__name__}: {e})") from e

        if response.status_code != 200:
            raise TransportError(
                url, f"Encountered status code {response.status_code}", response.status_code
            )
        logger.debug("Fetched %s (%d bytes)", url, len(response.content))
        return response.text

    async def stream(self, url: str) -> AsyncIterator[StreamEvent]:
        """Stream the triples of one page.

        Always ends with :data:`END_OF_STREAM` on success, also for pages
        without any triples.

        Args:
            url: Page URL

        Yields:
            Triples, then END_OF_STREAM

        Raises:
            TransportError: If the page could not be fetched
            ParseError: If the page is not valid TriG
        """
        body = await self.fetch(url)
        for triple in parse_trig(body, url):
            yield triple
        yield END_OF_STREAM
