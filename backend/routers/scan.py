"""Scan router: extract line items from a photographed receipt."""

import logging
import os

import anthropic
from fastapi import APIRouter, BackgroundTasks, Depends, File, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool

import schemas
from dependencies import require_scan_access
from scanner.normalizer import normalize_scanned_items
from scanner.parser import ScanParseError, parse_classifier_reply
from scanner.service import ClassifierUnavailableError, UnexpectedReplyError, receipt_classifier
from utils.files import detect_image_media_type, read_upload_file_securely
from utils.notifications import notify_bill_scanned
from utils.rate_limiter import scan_rate_limiter

logger = logging.getLogger(__name__)

MAX_IMAGE_BYTES = int(os.getenv("SCAN_MAX_IMAGE_BYTES", str(5 * 1024 * 1024)))


router = APIRouter(tags=["scan"])


@router.post(
    "/scan-bill",
    response_model=schemas.ScanResult,
    dependencies=[Depends(scan_rate_limiter), Depends(require_scan_access)]
)
async def scan_bill(
    background_tasks: BackgroundTasks,
    file: UploadFile = File(...)
):
    """
    Extract line items from a receipt photo using the vision model.

    Args:
        file: Uploaded image file (JPEG, PNG, GIF, WebP), at most 5MB

    Returns:
        Validated items (name, line-total price, quantity, confidence) and
        any warnings the model reported. Nothing is added to a bill here; the
        client reviews the items and posts them to /bills/{id}/scanned-items.
    """
    image_content = await read_upload_file_securely(file, MAX_IMAGE_BYTES)
    media_type = detect_image_media_type(image_content)
    logger.info("Scanning receipt: %s, %d bytes", media_type, len(image_content))

    try:
        reply = await run_in_threadpool(receipt_classifier.extract_items, image_content, media_type)
        parsed = parse_classifier_reply(reply)
    except ClassifierUnavailableError as e:
        logger.error(str(e))
        raise HTTPException(
            status_code=503,
            detail="Receipt scanning is not available right now."
        )
    except UnexpectedReplyError:
        raise HTTPException(status_code=500, detail="Unexpected response type from AI")
    except ScanParseError as e:
        logger.warning(f"Failed to parse AI response: {e}")
        raise HTTPException(
            status_code=422,
            detail="Failed to parse bill items. Please try a clearer photo."
        )
    except anthropic.RateLimitError:
        raise HTTPException(
            status_code=429,
            detail="Too many requests. Please wait a moment and try again."
        )
    except anthropic.AuthenticationError:
        logger.error("Vision model rejected the API key")
        raise HTTPException(
            status_code=500,
            detail="API key not configured. Please check server configuration."
        )
    except anthropic.APIError as e:
        logger.error(f"Vision model error: {e}")
        raise HTTPException(
            status_code=502,
            detail="AI service temporarily unavailable. Please try again."
        )

    items = normalize_scanned_items(parsed["items"])
    logger.info("Scanned %d items (%d raw)", len(items), len(parsed["items"]))

    # Fire-and-forget: runs after the response, failures are only logged
    background_tasks.add_task(notify_bill_scanned, items)

    return schemas.ScanResult(items=items, warnings=parsed["warnings"])
