import io
import re
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import cv2
import numpy as np
import pytesseract
from PIL import Image

from .exceptions import OCRError

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# A word followed by a number, optionally with a mg/ml unit: "Aspirin 500mg"
MEDICINE_PATTERN = re.compile(r"([A-Za-z]+)\s*(\d+(?:\.\d+)?(?:\s*mg|\s*ml)?)")

SUCCESS_MESSAGE = "Prescription processed successfully"
NO_MATCH_MESSAGE = "Could not extract medicine information. Please fill in manually."
FAILURE_MESSAGE = "Failed to process prescription. Please try again or fill in manually."


@dataclass(frozen=True)
class OcrPrefill:
    """Suggested form values from a prescription photo"""
    success: bool
    message: str
    medicine_name: str = ""
    dosage: str = ""
    text: str = ""


def preprocess_image(image):
    """
    Grayscale, denoise and binarize an image for OCR
    """
    # Convert PIL image to OpenCV format
    if isinstance(image, Image.Image):
        image = cv2.cvtColor(np.array(image), cv2.COLOR_RGB2BGR)

    gray = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)

    # Bilateral filter keeps letter edges while removing noise
    filtered = cv2.bilateralFilter(gray, 9, 75, 75)

    thresh = cv2.adaptiveThreshold(
        filtered, 255, cv2.ADAPTIVE_THRESH_GAUSSIAN_C, cv2.THRESH_BINARY, 11, 2
    )

    kernel = np.ones((1, 1), np.uint8)
    cleaned = cv2.morphologyEx(thresh, cv2.MORPH_CLOSE, kernel)
    cleaned = cv2.morphologyEx(cleaned, cv2.MORPH_OPEN, kernel)

    return cleaned


def extract_text(image_bytes: bytes) -> str:
    """
    Extract text from a JPG/PNG prescription photo
    """
    try:
        image = Image.open(io.BytesIO(image_bytes))
        if image.mode != 'RGB':
            image = image.convert('RGB')

        text = pytesseract.image_to_string(Image.fromarray(preprocess_image(image)))
        if not text.strip():
            # Fall back to the unprocessed image
            text = pytesseract.image_to_string(image)

        logger.info(f"Extracted {len(text.strip())} characters from image")
        return text

    except Exception as e:
        logger.error(f"Error extracting text from image: {e}")
        raise OCRError(f"OCR failed: {e}")


def extract_medicine_suggestion(text: str) -> Optional[Tuple[str, str]]:
    """First (medicine, dosage) pair found in OCR text"""
    match = MEDICINE_PATTERN.search(text or "")
    if not match:
        return None
    return match.group(1).strip(), match.group(2).strip()


def prefill_from_image(image_bytes: bytes) -> OcrPrefill:
    """
    Suggest medicine name and dosage from a prescription photo.

    Never raises; failures come back as a manual-entry notice.
    """
    try:
        text = extract_text(image_bytes)
    except OCRError:
        return OcrPrefill(success=False, message=FAILURE_MESSAGE)

    suggestion = extract_medicine_suggestion(text)
    if suggestion is None:
        logger.warning("No medicine/dosage pair found in OCR text")
        return OcrPrefill(success=False, message=NO_MATCH_MESSAGE, text=text)

    medicine_name, dosage = suggestion
    return OcrPrefill(
        success=True,
        message=SUCCESS_MESSAGE,
        medicine_name=medicine_name,
        dosage=dosage,
        text=text,
    )
