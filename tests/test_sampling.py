"""Tests for page sampling."""

import math

import pytest

from host_sampler.errors import InvalidSizeError
from host_sampler.sampling import page_count, sample_pages


class TestPageCount:
    """Test the number of pages of a fragment."""

    def test_exact_multiple(self):
        assert page_count(1000, 100) == 10

    def test_partial_last_page(self):
        assert page_count(1001, 100) == 11

    def test_fewer_triples_than_page_size(self):
        assert page_count(5, 100) == 1

    @pytest.mark.parametrize("declared", [0, -1, -100])
    def test_non_positive_size_rejected(self, declared):
        with pytest.raises(InvalidSizeError):
            page_count(declared)


class TestSamplePages:
    """Test the spread of sampled pages."""

    def test_one_page_at_ten_percent(self):
        """1000 triples at ratio 0.1: ten pages, one sampled at page 1."""
        assert sample_pages(1000, page_size=100, sampling_ratio=0.1) == [1]

    def test_half_of_the_pages(self):
        """Every other page is sampled at ratio 0.5."""
        assert sample_pages(1000, page_size=100, sampling_ratio=0.5) == [1, 3, 5, 7, 9]

    def test_full_ratio_samples_every_page(self):
        assert sample_pages(950, page_size=100, sampling_ratio=1.0) == list(range(1, 11))

    def test_fractional_positions_are_floored(self):
        """3 pages out of 7 sit at 1, 1 + 7/3 and 1 + 14/3."""
        assert sample_pages(700, page_size=100, sampling_ratio=0.4) == [1, 3, 5]

    def test_tiny_ratio_still_samples_one_page(self):
        assert sample_pages(10_000, page_size=100, sampling_ratio=1e-9) == [1]

    def test_tiny_dataset(self):
        assert sample_pages(1, page_size=100, sampling_ratio=0.5) == [1]

    def test_custom_page_size(self):
        assert sample_pages(1000, page_size=250, sampling_ratio=0.5) == [1, 3]

    def test_non_positive_size_rejected(self):
        with pytest.raises(InvalidSizeError):
            sample_pages(0, page_size=100, sampling_ratio=0.5)

    @pytest.mark.parametrize("declared", [1, 99, 100, 101, 999, 1000, 12_345, 1_000_001])
    @pytest.mark.parametrize("ratio", [0.001, 0.1, 0.25, 0.3, 0.5, 0.7, 0.99, 1.0])
    def test_pages_within_range(self, declared, ratio):
        """Between 1 and max_page strictly increasing pages, all in [1, max_page]."""
        max_page = math.ceil(declared / 100)
        pages = sample_pages(declared, page_size=100, sampling_ratio=ratio)

        assert 1 <= len(pages) <= max_page
        assert all(1 <= page <= max_page for page in pages)
        assert pages == sorted(set(pages))
        assert pages[0] == 1
