"""POST /v1/ocr - extract alert text from a screenshot"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Request

from alert_ledger.api.v1.schemas import OCRRequest, OCRResponse
from alert_ledger.api.dependencies import get_ocr_client, get_request_id
from alert_ledger.infrastructure.clients.ocr import OCRClient, decode_image
from alert_ledger.domain.exceptions import InvalidImageError, OCRServiceError

router = APIRouter()


@router.post("/ocr", response_model=OCRResponse)
async def extract_alert_text(
    request_body: OCRRequest,
    request: Request,
    ocr_client: OCRClient = Depends(get_ocr_client),
):
    """
    Return the raw text of a bank alert screenshot.

    The text is not classified here; the caller reviews it and posts it to
    /v1/alerts.
    """
    request_id = get_request_id(request)

    try:
        image_bytes = decode_image(request_body.image_base64)
        text = await ocr_client.extract_text(image_bytes, request_body.media_type)

    except InvalidImageError as e:
        logging.warning(f"Invalid image: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=400, detail=str(e))

    except OCRServiceError as e:
        logging.error(f"OCR error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="OCR service unavailable")

    return OCRResponse(text=text)
