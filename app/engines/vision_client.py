"""
Google Cloud Vision client wrapper and request builder.
"""
from enum import Enum
from typing import Optional

import google.auth
from google.cloud import vision

from api.core import get_logger
from config import CLOUD_PLATFORM_SCOPE, MODE_OBJECT, MODE_OCR

logger = get_logger("vision2page.vision")


class RecognitionMode(str, Enum):
    OCR = MODE_OCR
    OBJECT = MODE_OBJECT


class VisionServiceError(Exception):
    """The annotation service returned an error for the image."""

    def __init__(self, message: str, code: int = 0):
        super().__init__(message)
        self.code = code


def build_annotate_request(content: bytes, mode: RecognitionMode = RecognitionMode.OCR,
                           language: Optional[str] = None) -> vision.AnnotateImageRequest:
    """
    Build an annotation request for one image.

    Args:
        content: Encoded image bytes
        mode: OCR selects document text detection, OBJECT selects object localization
        language: Optional language hint, e.g. 'en'
    """
    mode = RecognitionMode(mode)
    if mode == RecognitionMode.OBJECT:
        feature = vision.Feature(type_=vision.Feature.Type.OBJECT_LOCALIZATION)
    else:
        feature = vision.Feature(type_=vision.Feature.Type.DOCUMENT_TEXT_DETECTION)

    language_hints = [language] if language else []

    return vision.AnnotateImageRequest(
        image=vision.Image(content=content),
        features=[feature],
        image_context=vision.ImageContext(language_hints=language_hints),
    )


class VisionClient:
    """Thin wrapper around ``ImageAnnotatorClient`` for single-image requests."""

    def __init__(self, client=None):
        self._client = client

    @classmethod
    def from_credentials_file(cls, credentials_path: str) -> 'VisionClient':
        """
        Create a client from a service account key file.

        Raises:
            google.auth.exceptions.DefaultCredentialsError: if the file is missing or invalid
        """
        credentials, project_id = google.auth.load_credentials_from_file(
            credentials_path, scopes=[CLOUD_PLATFORM_SCOPE]
        )
        logger.info("Loaded Cloud Vision credentials", extra={"extra_data": {"project": project_id}})
        return cls(vision.ImageAnnotatorClient(credentials=credentials))

    @property
    def is_ready(self) -> bool:
        return self._client is not None

    def annotate(self, request: vision.AnnotateImageRequest) -> vision.AnnotateImageResponse:
        """
        Send one request and return its response.

        Raises:
            VisionServiceError: if the service reports an error for the image
        """
        if self._client is None:
            raise RuntimeError("Vision client is not initialized")

        features = [vision.Feature.Type(f.type_).name for f in request.features]
        logger.debug(f"Calling batch_annotate_images with features {features}")

        batch = self._client.batch_annotate_images(requests=[request])
        responses = list(batch.responses)
        if not responses:
            raise VisionServiceError("Empty batch response")

        response = responses[0]
        if response.error.code or response.error.message:
            raise VisionServiceError(response.error.message, code=response.error.code)
        return response
