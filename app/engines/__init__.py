# Engines package - Cloud Vision access, response mapping and the conversion pipeline
from .vision_client import RecognitionMode, VisionClient, VisionServiceError, build_annotate_request
from .response_mapper import ResponseMapper, get_region_type, finish_text_line
from .pipeline import ErrorCode, ConversionError, OcrToPageConverter

__all__ = [
    'RecognitionMode', 'VisionClient', 'VisionServiceError', 'build_annotate_request',
    'ResponseMapper', 'get_region_type', 'finish_text_line',
    'ErrorCode', 'ConversionError', 'OcrToPageConverter'
]
