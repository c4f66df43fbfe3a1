"""OCR HTTP client for turning bank alert screenshots into text"""

import asyncio
import base64
import httpx
from typing import Any, Dict
from alert_ledger.domain.exceptions import InvalidImageError, OCRServiceError
from alert_ledger.config import settings
from alert_ledger.infrastructure.observability.metrics import ocr_latency_histogram, ocr_failure_counter

OCR_PROMPT = "Extract ALL text from this bank alert SMS screenshot. Return ONLY the plain text with no commentary."


class OCRClient:
    """Client for an Anthropic-style Messages endpoint with image input"""

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url or settings.ocr_api_base
        self.api_key = api_key if api_key is not None else settings.ocr_api_key
        self.timeout = timeout or settings.http_timeout_seconds
        self.max_retries = settings.ocr_max_retries
        self.backoff_base = settings.ocr_backoff_base
        self.transport = transport

    def build_payload(self, image_bytes: bytes, media_type: str) -> Dict[str, Any]:
        if not media_type.startswith("image/"):
            raise InvalidImageError(f"Unsupported media type: {media_type}")
        if not image_bytes:
            raise InvalidImageError("Image is empty")

        return {
            "model": settings.ocr_model,
            "max_tokens": settings.ocr_max_tokens,
            "messages": [
                {
                    "role": "user",
                    "content": [
                        {
                            "type": "image",
                            "source": {
                                "type": "base64",
                                "media_type": media_type,
                                "data": base64.b64encode(image_bytes).decode("ascii"),
                            },
                        },
                        {"type": "text", "text": OCR_PROMPT},
                    ],
                }
            ],
        }

    @staticmethod
    def parse_text(data: Dict[str, Any]) -> str:
        """Join all text content blocks with newlines"""
        blocks = data.get("content") or []
        return "\n".join(block["text"] for block in blocks if block.get("type") == "text")

    async def extract_text(self, image_bytes: bytes, media_type: str) -> str:
        """
        Send an image to the OCR service and return the raw text.

        Retry strategy:
        - Exponential backoff: 1s, 2s, 4s (base * 2^(attempt-1))
        - Retries on 5xx errors and network failures, not on 4xx
        - Tracks latency histogram and failure counter

        Raises:
            InvalidImageError: Payload is not an image
            OCRServiceError: On timeout, HTTP errors, or invalid response
        """
        payload = self.build_payload(image_bytes, media_type)
        headers = {
            "x-api-key": self.api_key,
            "anthropic-version": settings.ocr_api_version,
            "content-type": "application/json",
        }

        attempt = 0
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            while True:
                try:
                    with ocr_latency_histogram.time():
                        response = await client.post(
                            f"{self.base_url}/v1/messages",
                            json=payload,
                            headers=headers,
                        )
                        response.raise_for_status()
                    return self.parse_text(response.json())

                except httpx.TimeoutException as e:
                    ocr_failure_counter.inc()
                    raise OCRServiceError(f"OCR timeout after {self.timeout}s") from e
                except httpx.HTTPStatusError as e:
                    ocr_failure_counter.inc()
                    attempt += 1
                    if e.response.status_code < 500 or attempt >= self.max_retries:
                        raise OCRServiceError(f"OCR service error: {e.response.status_code}") from e
                except httpx.RequestError as e:
                    ocr_failure_counter.inc()
                    attempt += 1
                    if attempt >= self.max_retries:
                        raise OCRServiceError(f"OCR service unreachable: {e}") from e
                except (KeyError, ValueError, TypeError, AttributeError) as e:
                    raise OCRServiceError(f"Invalid OCR response: {e}") from e

                # Exponential backoff: 1s, 2s, 4s
                backoff = self.backoff_base * (2 ** (attempt - 1))
                await asyncio.sleep(backoff)


def decode_image(image_base64: str) -> bytes:
    """Decode a base64 image body (data: URL prefix tolerated)"""
    if "," in image_base64 and image_base64.startswith("data:"):
        image_base64 = image_base64.split(",", 1)[1]
    try:
        return base64.b64decode(image_base64, validate=True)
    except ValueError as e:
        raise InvalidImageError("Image is not valid base64") from e
