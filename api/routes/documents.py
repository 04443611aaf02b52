"""
Document processing routes: image upload to PAGE XML.
"""
import os
import shutil
import time
import tempfile
from typing import Optional
from fastapi import APIRouter, File, UploadFile, Form, HTTPException, Request
from fastapi.responses import FileResponse

from api.schemas import ProcessingOptions, ProcessingResult, ProcessingStatus
from api.core import config, get_logger, generate_request_id, set_request_id
from api.services import get_processor
from api.routes.operations import record_request, REQUEST_COUNT, REQUEST_LATENCY
from app.engines import RecognitionMode

router = APIRouter(prefix="/v1", tags=["Document Processing"])
logger = get_logger("vision2page.documents")

ALLOWED_IMAGES = {f".{ext.strip().lower()}" for ext in config.ALLOWED_EXTENSIONS if ext.strip()}

# Generated files kept for download: file_key -> (file_path, temp_dir, expires_at)
_output_store = {}


def remove_temp_dir(temp_dir: str):
    shutil.rmtree(temp_dir, ignore_errors=True)


def purge_expired_outputs(now: Optional[float] = None) -> int:
    """Forget expired downloads and delete temp dirs no live entry points into."""
    now = time.time() if now is None else now
    expired = [key for key, (_, _, expires_at) in _output_store.items() if expires_at <= now]
    dirs = {_output_store.pop(key)[1] for key in expired}

    live_dirs = {temp_dir for _, temp_dir, _ in _output_store.values()}
    for temp_dir in dirs - live_dirs:
        remove_temp_dir(temp_dir)

    if expired:
        logger.debug(f"Purged {len(expired)} expired outputs")
    return len(expired)


def clear_output_store():
    """Drop every stored output and its temp dir (shutdown)."""
    for _, temp_dir, _ in _output_store.values():
        remove_temp_dir(temp_dir)
    _output_store.clear()


def validate_ext(filename: str, allowed: set) -> bool:
    return os.path.splitext(filename or "")[1].lower() in allowed


async def save_file(upload: UploadFile, dest: str) -> str:
    with open(dest, "wb") as f:
        f.write(await upload.read())
    return dest


def generate_download_urls(request: Request, request_id: str, output_files: dict, temp_dir: str) -> dict:
    """Register output files for download and build their URLs."""
    base_url = str(request.base_url).rstrip("/")
    expires_at = time.time() + config.OUTPUT_TTL_SECONDS
    download_urls = {}

    for format_type, file_path in output_files.items():
        if os.path.exists(file_path):
            file_key = f"{request_id}_{format_type}"
            _output_store[file_key] = (file_path, temp_dir, expires_at)
            download_urls[format_type] = f"{base_url}/v1/download/{file_key}"

    return download_urls


@router.get("/download/{file_key}", summary="Download Generated File")
async def download_file(file_key: str):
    """Download a generated PAGE XML file until it expires."""
    purge_expired_outputs()
    if file_key not in _output_store:
        raise HTTPException(404, "File not found or expired")

    file_path, _, _ = _output_store[file_key]
    if not os.path.exists(file_path):
        del _output_store[file_key]
        raise HTTPException(404, "File not found")

    return FileResponse(
        path=file_path,
        filename="page.xml",
        media_type="application/xml"
    )


@router.post("/process/image", response_model=ProcessingResult, summary="Convert Image to PAGE XML")
async def process_single_image(
    request: Request,
    file: UploadFile = File(...),
    mode: RecognitionMode = Form(RecognitionMode(config.DEFAULT_MODE)),
    language: Optional[str] = Form(None)
):
    """Upload one image, annotate it with Cloud Vision and convert the result to PAGE XML."""
    request_id = generate_request_id()
    set_request_id(request_id)
    start = time.time()
    REQUEST_COUNT.labels(method="POST", endpoint="/v1/process/image", status="started").inc()
    purge_expired_outputs()

    logger.info(f"Processing image: {file.filename}", extra={"extra_data": {"request_id": request_id, "mode": mode.value}})

    if not validate_ext(file.filename, ALLOWED_IMAGES):
        logger.warning(f"Invalid file type: {file.filename}")
        raise HTTPException(400, f"Invalid file type. Allowed: {sorted(ALLOWED_IMAGES)}")

    options = ProcessingOptions(mode=mode, language=language or config.DEFAULT_LANGUAGE)

    temp_dir = tempfile.mkdtemp(prefix="v2p_")
    try:
        input_path = os.path.join(temp_dir, os.path.basename(file.filename))
        await save_file(file, input_path)

        processor = await get_processor()
        result = await processor.process_image(input_path, temp_dir, options, request_id)
    except Exception as e:
        logger.exception(f"Processing failed: {e}")
        remove_temp_dir(temp_dir)
        record_request(False)
        raise HTTPException(500, str(e))

    result.download_urls = generate_download_urls(request, request_id, result.output_files, temp_dir)
    if not result.download_urls:
        remove_temp_dir(temp_dir)

    processing_time = (time.time() - start) * 1000
    success = result.status == ProcessingStatus.COMPLETED
    record_request(success, processing_time)

    logger.info(f"Image processed: {result.status.value}", extra={"extra_data": {"request_id": request_id, "time_ms": processing_time}})

    REQUEST_COUNT.labels(method="POST", endpoint="/v1/process/image", status="success" if success else "failed").inc()
    REQUEST_LATENCY.labels(endpoint="/v1/process/image").observe(time.time() - start)

    return result
