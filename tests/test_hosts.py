"""Tests for host extraction from RDF terms."""

import pytest
from rdflib import BNode, Literal, URIRef

from host_sampler.hosts import extract_host


class TestExtractHost:
    """Test which terms contribute a host."""

    def test_http_iri(self):
        assert extract_host(URIRef("http://dbpedia.org/resource/Berlin")) == "dbpedia.org"

    def test_https_iri_with_port_and_user(self):
        assert extract_host(URIRef("https://user@data.example.org:8443/x")) == "data.example.org"

    def test_host_is_lower_cased(self):
        assert extract_host(URIRef("http://Example.ORG/Thing")) == "example.org"

    def test_literal_has_no_host(self):
        assert extract_host(Literal("http://example.org/not-an-iri")) is None

    def test_blank_node_has_no_host(self):
        assert extract_host(BNode()) is None

    @pytest.mark.parametrize("iri", ["urn:isbn:0451450523", "mailto:someone@example.org", "tag:x"])
    def test_iri_without_authority(self, iri):
        assert extract_host(URIRef(iri)) is None

    def test_malformed_authority_does_not_raise(self):
        assert extract_host(URIRef("http://[::1/broken")) is None
