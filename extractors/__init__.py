from .ai import AIExtractor, parse_json_object
from .base import ProductExtractor
from .dom import SelectorExtractor
from .tiered import TieredExtractor, build_extractor

__all__ = [
    "AIExtractor",
    "ProductExtractor",
    "SelectorExtractor",
    "TieredExtractor",
    "build_extractor",
    "parse_json_object",
]
