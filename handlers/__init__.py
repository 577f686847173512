from .detail import DetailFetcher
from .navigation import PacingPolicy, navigate, pause
from .pagination import ListingPaginator, page_url

__all__ = [
    "DetailFetcher",
    "ListingPaginator",
    "PacingPolicy",
    "navigate",
    "page_url",
    "pause",
]
