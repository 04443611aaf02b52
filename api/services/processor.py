"""
Document processing service: runs conversions off the event loop.
"""
import os
import time
import asyncio
from typing import Optional
from concurrent.futures import ThreadPoolExecutor

from api.core import config, get_logger
from api.schemas import ProcessingOptions, ProcessingResult, ProcessingStatus, RegionSummary
from app.builders import PageXmlBuilder
from app.engines import ConversionError, ErrorCode, OcrToPageConverter, VisionClient
from app.models import Document, TextRegion

logger = get_logger("vision2page.processor")

NO_CONTENT_CODES = (ErrorCode.NO_PAGE, ErrorCode.NO_OBJECTS)


class DocumentProcessor:
    """Converts uploaded images to PAGE XML using one shared Vision client."""

    def __init__(self, client: Optional[VisionClient] = None):
        self._converter: Optional[OcrToPageConverter] = OcrToPageConverter(client) if client else None
        self._builder = PageXmlBuilder()
        self._executor = ThreadPoolExecutor(max_workers=config.MAX_WORKERS)

    async def initialize(self) -> bool:
        """Create the Vision client from the configured credentials."""
        if self._converter is not None:
            return True
        logger.info("Initializing DocumentProcessor...")
        try:
            loop = asyncio.get_running_loop()
            self._converter = await loop.run_in_executor(
                self._executor, OcrToPageConverter.from_credentials_file, config.CREDENTIALS_PATH
            )
            logger.info("Vision client ready")
            return True
        except ConversionError as e:
            logger.error(f"Failed to initialize: {e}")
            return False
        except Exception as e:
            logger.exception(f"Failed to initialize: {e}")
            return False

    @property
    def is_ready(self) -> bool:
        return self._converter is not None and self._converter.client.is_ready

    def _convert_and_write(self, image_path: str, output_path: str, options: ProcessingOptions) -> Document:
        document = self._converter.convert(image_path, options.mode, options.language)
        self._builder.build(document, output_path)
        return document

    async def process_image(self, image_path: str, output_dir: str, options: ProcessingOptions,
                            request_id: str) -> ProcessingResult:
        """Convert a single image; failures are reported in the result, not raised."""
        start_time = time.time()
        logger.info(f"Processing image: {image_path}", extra={"extra_data": {"request_id": request_id}})

        if not self.is_ready:
            return self._failed(request_id, start_time, ErrorCode.GENERAL_ERROR, "Vision client is not initialized")

        output_path = os.path.join(output_dir, "output.xml")
        try:
            loop = asyncio.get_running_loop()
            document = await loop.run_in_executor(
                self._executor, self._convert_and_write, image_path, output_path, options
            )
        except ConversionError as e:
            logger.warning(f"Conversion failed ({e.code.name}): {e}", extra={"extra_data": {"request_id": request_id}})
            status = ProcessingStatus.NO_CONTENT if e.code in NO_CONTENT_CODES else ProcessingStatus.FAILED
            return self._failed(request_id, start_time, e.code, str(e), status)
        except Exception as e:
            logger.exception(f"Processing failed: {e}", extra={"extra_data": {"request_id": request_id}})
            return self._failed(request_id, start_time, ErrorCode.GENERAL_ERROR, str(e))

        regions = [self._convert_region(region, f"r{i}") for i, region in enumerate(document.regions)]
        processing_time = (time.time() - start_time) * 1000
        logger.info(
            f"Image processed successfully in {processing_time:.1f}ms",
            extra={"extra_data": {"request_id": request_id, "regions": len(regions)}}
        )

        return ProcessingResult(
            request_id=request_id, status=ProcessingStatus.COMPLETED,
            processing_time_ms=processing_time,
            image_width=document.width, image_height=document.height,
            regions_detected=len(regions), regions=regions,
            output_files={"xml": output_path}
        )

    def _failed(self, request_id: str, start_time: float, code: ErrorCode, message: str,
                status: ProcessingStatus = ProcessingStatus.FAILED) -> ProcessingResult:
        return ProcessingResult(
            request_id=request_id, status=status, error_code=int(code),
            processing_time_ms=(time.time() - start_time) * 1000,
            errors=[message]
        )

    def _convert_region(self, region, region_id: str) -> RegionSummary:
        """Convert internal region to API schema."""
        is_text = isinstance(region, TextRegion)
        return RegionSummary(
            id=region_id,
            type=region.regionType.value,
            points=[[x, y] for x, y in region.coords.points],
            custom=region.custom,
            text=region.text if is_text else None,
            line_count=len(region.textLines) if is_text else 0
        )

    async def shutdown(self):
        logger.info("Shutting down DocumentProcessor")
        self._executor.shutdown(wait=True)


# Global instance
_processor: Optional[DocumentProcessor] = None


async def get_processor() -> DocumentProcessor:
    global _processor
    if _processor is None:
        _processor = DocumentProcessor()
        await _processor.initialize()
    return _processor


async def initialize_processor():
    global _processor
    _processor = DocumentProcessor()
    await _processor.initialize()


async def shutdown_processor():
    global _processor
    if _processor:
        await _processor.shutdown()
        _processor = None
