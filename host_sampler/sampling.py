"""Choose which pages of a fragment to fetch."""

import math
from fractions import Fraction

from host_sampler.config import DEFAULT_PAGE_SIZE, DEFAULT_SAMPLING_RATIO
from host_sampler.errors import InvalidSizeError


def page_count(declared_triples: int, page_size: int = DEFAULT_PAGE_SIZE) -> int:
    """Number of pages needed to serve ``declared_triples``.

    Raises:
        InvalidSizeError: If ``declared_triples`` is not positive
    """
    if declared_triples <= 0:
        msg = f"Declared triple count must be positive, got {declared_triples}"
        raise InvalidSizeError(msg)
    return math.ceil(Fraction(declared_triples, page_size))


def sample_pages(
    declared_triples: int,
    page_size: int = DEFAULT_PAGE_SIZE,
    sampling_ratio: float = DEFAULT_SAMPLING_RATIO,
) -> list[int]:
    """Spread sampled pages evenly over the whole page range.

    The number of pages is ``ceil(declared_triples * sampling_ratio / page_size)``
    clamped to ``[1, max_page]``. Page ``i`` sits at ``1 + i * max_page / pages``,
    floored to an integer page number. Arithmetic is exact, so a ratio of
    ``0.1`` on 1000 triples yields exactly one page.

    Args:
        declared_triples: Triple count of the dataset
        page_size: Triples per page
        sampling_ratio: Fraction of pages to fetch, in (0, 1]

    Returns:
        Strictly increasing page numbers, all within ``[1, max_page]``

    Raises:
        InvalidSizeError: If ``declared_triples`` is not positive
    """
    max_page = page_count(declared_triples, page_size)
    # str() gives the shortest decimal form, so 0.1 becomes exactly 1/10
    ratio = Fraction(str(sampling_ratio))
    pages_to_sample = math.ceil(declared_triples * ratio / page_size)
    pages_to_sample = min(max(pages_to_sample, 1), max_page)

    page_interval = Fraction(max_page, pages_to_sample)
    return [math.floor(1 + i * page_interval) for i in range(pages_to_sample)]
