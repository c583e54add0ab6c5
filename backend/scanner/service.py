import base64
import logging
import os

import anthropic

from scanner.prompts import EXTRACTION_PROMPT

logger = logging.getLogger(__name__)

SCAN_MODEL = os.getenv("SCAN_MODEL", "claude-sonnet-4-20250514")
SCAN_MAX_TOKENS = int(os.getenv("SCAN_MAX_TOKENS", "2048"))
SCAN_TIMEOUT_SECONDS = float(os.getenv("SCAN_TIMEOUT_SECONDS", "60"))


class ClassifierUnavailableError(Exception):
    """Raised when the vision model client could not be created."""


class UnexpectedReplyError(Exception):
    """Raised when the model replies with something other than text."""


class ReceiptClassifier:
    """
    Singleton wrapper around the Anthropic Messages API for receipt extraction.
    Creates the client once and reuses it for all requests.
    """

    def __init__(self):
        if not os.getenv("ANTHROPIC_API_KEY"):
            logger.warning("ANTHROPIC_API_KEY not set. Receipt scanning will not work.")
            self.client = None
            return

        try:
            self.client = anthropic.Anthropic(timeout=SCAN_TIMEOUT_SECONDS, max_retries=0)
        except Exception as e:
            logger.warning(f"Failed to initialize receipt classifier: {e}")
            self.client = None

    def extract_items(self, image_bytes: bytes, media_type: str) -> str:
        """
        Send a receipt image to the vision model and return its raw text reply.

        Args:
            image_bytes: Raw image bytes (JPEG, PNG, GIF, WebP)
            media_type: Media type of the image, e.g. "image/png"

        Returns:
            The model's text reply, expected to be a JSON document

        Raises:
            ClassifierUnavailableError: If the client is not initialized
            UnexpectedReplyError: If the reply is not a text block
            anthropic.APIError: On any API or transport failure
        """
        if not self.client:
            raise ClassifierUnavailableError("Receipt scanning is not available (missing API key)")

        response = self.client.messages.create(
            model=SCAN_MODEL,
            max_tokens=SCAN_MAX_TOKENS,
            messages=[
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
                        {"type": "text", "text": EXTRACTION_PROMPT},
                    ],
                }
            ],
        )

        if not response.content or response.content[0].type != "text":
            raise UnexpectedReplyError("Unexpected response type from AI")

        return response.content[0].text


# Singleton instance - initialized once, reused for all requests
receipt_classifier = ReceiptClassifier()
