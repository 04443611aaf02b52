# Utils package - Shared utilities
from .geometry import convert_bounding_poly, line_polygon_from_words
from .image_processing import read_image_size, read_image_bytes, image_filename

__all__ = [
    'convert_bounding_poly', 'line_polygon_from_words',
    'read_image_size', 'read_image_bytes', 'image_filename'
]
