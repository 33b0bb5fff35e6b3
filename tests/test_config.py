"""Tests for sampling configuration."""

import pytest

from host_sampler.config import SamplingConfig


class TestSamplingConfig:
    """Test validation of the sampling ratio and page size."""

    def test_defaults(self):
        config = SamplingConfig()
        assert config.sampling_ratio == 0.5
        assert config.page_size == 100

    @pytest.mark.parametrize("ratio", [0, -0.1, 1.01])
    def test_ratio_out_of_range(self, ratio):
        with pytest.raises(ValueError):
            SamplingConfig(sampling_ratio=ratio)

    def test_full_ratio_allowed(self):
        assert SamplingConfig(sampling_ratio=1).sampling_ratio == 1

    def test_page_size_must_be_positive(self):
        with pytest.raises(ValueError):
            SamplingConfig(page_size=0)
