from .extractor import ContentReferenceTracker, ExplicitListTracker, MediaTracker, extract_image_urls
from .size import measure_size, validate_size

__all__ = [
    "ContentReferenceTracker",
    "ExplicitListTracker",
    "MediaTracker",
    "extract_image_urls",
    "measure_size",
    "validate_size",
]
