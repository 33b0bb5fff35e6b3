"""Pytest fixtures and an in-memory fragment server for testing."""

from collections.abc import Iterable
from typing import TypeAlias

import httpx
import pytest

from host_sampler.triple_stream import TripleStreamClient

NTriple: TypeAlias = tuple[str, str, str]

VOID_TRIPLES = "<http://rdfs.org/ns/void#triples>"
XSD_INTEGER = "<http://www.w3.org/2001/XMLSchema#integer>"
HYDRA_NEXT = "<http://www.w3.org/ns/hydra/core#next>"


def trig_page(endpoint: str, declared: int | str | None, data: Iterable[NTriple] = ()) -> str:
    """Build a fragment page the way a TPF server serves it.

    Metadata lives in a named graph, data triples in the default graph.

    Args:
        endpoint: Fragment URL, used as subject of the metadata
        declared: Value of void:triples (None omits the metadata triple)
        data: Data triples as N-Triples term strings
    """
    lines = [f"<{endpoint}#metadata> {{"]
    if declared is not None:
        lines.append(f'  <{endpoint}> {VOID_TRIPLES} "{declared}"^^{XSD_INTEGER} .')
    lines.append(f"  <{endpoint}> {HYDRA_NEXT} <{endpoint}?page=2> .")
    lines.append("}")
    lines.extend(f"{s} {p} {o} ." for s, p, o in data)
    return "\n".join(lines) + "\n"


class FakeFragmentServer:
    """Serves fragments from memory through httpx.MockTransport.

    A request without a ``page`` parameter gets the metadata page. Page
    numbers without registered data get an empty data graph, like the
    tail of a real fragment.
    """

    def __init__(self) -> None:
        self.declared: dict[str, int | str | None] = {}
        self.pages: dict[str, dict[int, list[NTriple]]] = {}
        self.statuses: dict[str, int] = {}
        self.bodies: dict[str, str] = {}
        self.unreachable: set[str] = set()
        self.requests: list[httpx.Request] = []

    def add_fragment(
        self,
        endpoint: str,
        declared: int | str | None,
        pages: dict[int, list[NTriple]] | None = None,
    ) -> None:
        self.declared[endpoint] = declared
        self.pages[endpoint] = pages or {}

    def requested_pages(self, endpoint: str) -> list[int]:
        """Page numbers requested for ``endpoint``, in request order."""
        return [
            int(request.url.params["page"])
            for request in self.requests
            if "page" in request.url.params
            and str(request.url.copy_remove_param("page")) == endpoint
        ]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url)
        if url in self.unreachable:
            raise httpx.ConnectError("Connection refused", request=request)
        if url in self.statuses:
            return httpx.Response(self.statuses[url], text="error")
        if url in self.bodies:
            return httpx.Response(200, text=self.bodies[url])

        endpoint = str(request.url.copy_remove_param("page"))
        if endpoint not in self.declared:
            return httpx.Response(404, text="not found")
        page = request.url.params.get("page")
        data = self.pages[endpoint].get(int(page), []) if page is not None else []
        body = trig_page(endpoint, self.declared[endpoint], data)
        return httpx.Response(200, text=body, headers={"Content-Type": "application/trig"})


@pytest.fixture
def server() -> FakeFragmentServer:
    """Empty fragment server."""
    return FakeFragmentServer()


@pytest.fixture
def http_client(server: FakeFragmentServer) -> httpx.AsyncClient:
    """HTTP client routed to the fragment server."""
    return httpx.AsyncClient(transport=httpx.MockTransport(server.handler))


@pytest.fixture
def stream_client(http_client: httpx.AsyncClient) -> TripleStreamClient:
    """Triple stream client routed to the fragment server."""
    return TripleStreamClient(http_client)
