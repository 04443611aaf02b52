"""
Conversion pipeline: image file -> Cloud Vision -> PAGE document -> XML file.
"""
import os
from enum import IntEnum
from typing import Optional

from api.core import get_logger
from app.builders import PageXmlBuilder
from app.engines.response_mapper import ResponseMapper
from app.engines.vision_client import (
    RecognitionMode, VisionClient, VisionServiceError, build_annotate_request
)
from app.models import Document
from app.utils import image_filename, read_image_bytes, read_image_size
from config import MAX_IMAGE_BYTES, PAGE_XML_CREATOR

logger = get_logger("vision2page.pipeline")


class ErrorCode(IntEnum):
    """Process exit codes of a conversion run."""
    OK = 0
    SERVICE_ERROR = 1
    NO_PAGE = 2
    IO_ERROR = 3
    FILE_NOT_FOUND = 4
    GENERAL_ERROR = 5
    IMAGE_NOT_FOUND = 6
    UPLOAD_LIMIT_EXCEEDED = 7
    NO_OBJECTS = 8


class ConversionError(Exception):
    """A conversion run failed; ``code`` is the exit code to report."""

    def __init__(self, code: ErrorCode, message: str):
        super().__init__(message)
        self.code = code


class OcrToPageConverter:
    """Runs one image through the annotation service and maps the result."""

    def __init__(self, client: VisionClient, builder: Optional[PageXmlBuilder] = None):
        self.client = client
        self.builder = builder or PageXmlBuilder()

    @classmethod
    def from_credentials_file(cls, credentials_path: str) -> 'OcrToPageConverter':
        """
        Raises:
            ConversionError: FILE_NOT_FOUND if the key file does not exist
        """
        if not credentials_path or not os.path.isfile(credentials_path):
            raise ConversionError(ErrorCode.FILE_NOT_FOUND, f"Credentials file not found: {credentials_path}")
        return cls(VisionClient.from_credentials_file(credentials_path))

    @staticmethod
    def check_image(image_path: str):
        """Reject images that are missing or too large before any network call."""
        if not os.path.isfile(image_path):
            raise ConversionError(ErrorCode.IMAGE_NOT_FOUND, f"Image not found: {image_path}")
        size = os.path.getsize(image_path)
        if size > MAX_IMAGE_BYTES:
            raise ConversionError(
                ErrorCode.UPLOAD_LIMIT_EXCEEDED,
                f"Image is {size} bytes, upload limit is {MAX_IMAGE_BYTES}"
            )

    def convert(self, image_path: str, mode: RecognitionMode = RecognitionMode.OCR,
                language: Optional[str] = None) -> Document:
        """
        Annotate one image and map the response to a Document.

        Raises:
            ConversionError: with the exit code describing the failure
        """
        mode = RecognitionMode(mode)
        self.check_image(image_path)
        logger.info(f"Converting {image_path}", extra={"extra_data": {"mode": mode.value, "language": language}})

        try:
            request = build_annotate_request(read_image_bytes(image_path), mode, language)
            response = self.client.annotate(request)
        except VisionServiceError as e:
            logger.error(f"Error: {e}")
            raise ConversionError(ErrorCode.SERVICE_ERROR, str(e)) from e
        except OSError as e:
            raise ConversionError(ErrorCode.IO_ERROR, str(e)) from e

        mapper = ResponseMapper(image_filename=image_filename(image_path), creator=PAGE_XML_CREATOR)

        if mode == RecognitionMode.OBJECT:
            width, height = read_image_size(image_path)
            document = mapper.map_object_annotations(response.localized_object_annotations, width, height)
            if document is None:
                raise ConversionError(ErrorCode.NO_OBJECTS, "No objects in result")
        else:
            document = mapper.map_text_annotation(response.full_text_annotation)
            if document is None:
                raise ConversionError(ErrorCode.NO_PAGE, "No page in result")

        return document

    def run(self, image_path: str, output_path: str, mode: RecognitionMode = RecognitionMode.OCR,
            language: Optional[str] = None) -> ErrorCode:
        """Convert an image and write the PAGE XML file. Never raises; returns the exit code."""
        try:
            document = self.convert(image_path, mode, language)
            self.builder.build(document, output_path)
        except ConversionError as e:
            logger.error(f"Conversion failed ({e.code.name}): {e}")
            return e.code
        except OSError as e:
            logger.exception(f"I/O error: {e}")
            return ErrorCode.IO_ERROR
        except Exception as e:
            logger.exception(f"Conversion failed: {e}")
            return ErrorCode.GENERAL_ERROR

        logger.info(f"PAGE XML written to {output_path}")
        return ErrorCode.OK
