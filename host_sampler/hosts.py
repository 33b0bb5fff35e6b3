"""Extract hostnames from RDF terms."""

from typing import TypeAlias
from urllib.parse import urlsplit

from rdflib import BNode, Literal, URIRef

RDFTerm: TypeAlias = URIRef | Literal | BNode


def extract_host(term: RDFTerm) -> str | None:
    """Get the hostname of an IRI term.

    Literals, blank nodes, IRIs without an authority (``urn:``, ``mailto:``)
    and IRIs whose authority cannot be parsed all yield None.

    Args:
        term: Any RDF term

    Returns:
        Lower-cased hostname without port or user info, or None
    """
    if not isinstance(term, URIRef):
        return None
    try:
        host = urlsplit(str(term)).hostname
    except ValueError:
        # e.g. an unbalanced IPv6 bracket in the authority
        return None
    return host or None
