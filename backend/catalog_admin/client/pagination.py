"""Page math for list views."""

import math
from dataclasses import dataclass
from typing import List, Union

ELLIPSIS = "…"

# At or below this many pages every page number is listed.
MAX_FULL_PAGES = 7


@dataclass(frozen=True)
class PageWindow:
    """Position of ``current_page`` (1-based) in a listing of ``total`` items."""

    page_size: int
    total: int
    current_page: int = 1

    @property
    def total_pages(self) -> int:
        return max(1, math.ceil(self.total / self.page_size))

    @property
    def skip(self) -> int:
        return (self.current_page - 1) * self.page_size

    @property
    def range_start(self) -> int:
        """1-based index of the first item shown, 0 for an empty listing."""
        if self.total == 0:
            return 0
        return self.skip + 1

    @property
    def range_end(self) -> int:
        return min(self.current_page * self.page_size, self.total)

    @property
    def page_numbers(self) -> List[Union[int, str]]:
        """Page links: first, last, the current page's neighbours, ``…`` for gaps.

        >>> PageWindow(page_size=10, total=200, current_page=10).page_numbers
        [1, '…', 9, 10, 11, '…', 20]
        """
        last = self.total_pages
        if last <= MAX_FULL_PAGES:
            return list(range(1, last + 1))

        page = self.current_page
        pages: List[Union[int, str]] = [1]
        if page > 3:
            pages.append(ELLIPSIS)
        for number in range(max(2, page - 1), min(last - 1, page + 1) + 1):
            pages.append(number)
        if page < last - 2:
            pages.append(ELLIPSIS)
        pages.append(last)
        return pages
