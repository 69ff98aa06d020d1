"""
PureLabel AI - Text Extractor

Embedded OCR for label photos using Tesseract. Recognition is blocking,
so it runs in a worker thread to keep the event loop free.
"""

import asyncio
import io
import logging
from typing import Optional

import pytesseract
from PIL import Image, ImageOps

from purelabel.config import get_settings

logger = logging.getLogger(__name__)


class TextExtractor:
    """
    Converts a label photo into raw text.

    Any failure (unreadable image, missing tesseract binary) propagates to
    the caller unchanged.

    Example:
        extractor = TextExtractor()
        text = await extractor.extract_text(image_bytes)
    """

    def __init__(self, lang: Optional[str] = None, tesseract_cmd: Optional[str] = None):
        settings = get_settings()
        self.lang = lang or settings.tesseract_lang
        cmd = tesseract_cmd or settings.tesseract_cmd
        if cmd:
            pytesseract.pytesseract.tesseract_cmd = cmd

    async def extract_text(self, image_bytes: bytes) -> str:
        return await asyncio.to_thread(self._recognize, image_bytes)

    def _recognize(self, image_bytes: bytes) -> str:
        with Image.open(io.BytesIO(image_bytes)) as image:
            # Grayscale and honour EXIF rotation from phone cameras
            prepared = ImageOps.exif_transpose(image).convert("L")
            text = pytesseract.image_to_string(prepared, lang=self.lang)
        logger.debug(f"Tesseract extracted {len(text)} characters")
        return text
