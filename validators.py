"""
Validation module for extraction requests.

This module contains the extraction form data structure and the local
validation run before any extraction request reaches the network.
"""

import logging
from dataclasses import dataclass
from typing import List

from constants import DEFAULT_EXAM_TYPE, DEFAULT_PDF_FORMAT

# Get logger instance
logger = logging.getLogger(__name__)

EMPTY_TOPIC_ERROR = "Please enter a topic name"


class ExtractionValidationError(ValueError):
    """Raised when an extraction form fails local validation."""

    def __init__(self, errors: List[str]):
        super().__init__("; ".join(errors))
        self.errors = errors


@dataclass
class ExtractionForm:
    """
    Represents the extraction form as filled in by the user.

    Attributes:
        topic (str): Topic the MCQ question body must mention.
        exam_type (str): "SSC" or "BPSC".
        pdf_format (str): "text" or "image".
    """

    topic: str = ""
    exam_type: str = DEFAULT_EXAM_TYPE
    pdf_format: str = DEFAULT_PDF_FORMAT

    def __post_init__(self):
        """Normalize the topic by stripping whitespace."""
        self.topic = (self.topic or "").strip()

    def to_payload(self) -> dict:
        return {
            "topic": self.topic,
            "exam_type": self.exam_type,
            "pdf_format": self.pdf_format,
        }


class ExtractionFormValidator:
    """
    Validator for extraction forms.

    Exam type and PDF format are constrained by the selection controls and
    are not validated here.
    """

    @classmethod
    def validate(cls, form: ExtractionForm) -> List[str]:
        """
        Validate an extraction form.

        Args:
            form (ExtractionForm): The form to validate.

        Returns:
            List[str]: List of validation error messages. Empty list if validation passes.
        """
        errors = []
        if not form.topic.strip():
            errors.append(EMPTY_TOPIC_ERROR)
            return errors

        logger.debug(f"Validated extraction form for topic: {form.topic}")
        return errors
