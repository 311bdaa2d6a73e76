"""Trip extraction from screenshots via an OpenAI vision model.

Extraction output is only a set of candidate rows: it is normalized here
and validated by trip intake like any manually entered row.
"""

import json
import logging
from typing import Any, Protocol

from openai import AsyncOpenAI

from backend.app.config import settings
from backend.app.models.assistant import ExtractionResult
from backend.app.models.trip import TripDraft
from backend.app.trips.intake import normalize_extracted

logger = logging.getLogger(__name__)

EXTRACTION_PROMPT = (
    "Analyze this image, which shows a list of trips. Extract every departure and "
    "entry date. Return a JSON object with a single key 'trips' holding an array of "
    "objects, each with keys 'departure' and 'arrival' in 'YYYY-MM-DD' format. "
    "If no dates are found, return an empty array. Sort the trips by departure date."
)


class TripExtractionError(Exception):
    """The image could not be turned into trip rows."""


def parse_extraction_payload(content: str) -> list[TripDraft]:
    """Parse the model's JSON answer into normalized drafts.

    Accepts either {"trips": [...]} or a bare array.

    Raises:
        TripExtractionError: If the content is not the expected JSON shape
    """
    try:
        data: Any = json.loads(content)
    except json.JSONDecodeError as e:
        raise TripExtractionError("Model returned invalid JSON") from e

    if isinstance(data, dict):
        items = data.get("trips", [])
    else:
        items = data

    if not isinstance(items, list):
        raise TripExtractionError("Model returned an unexpected JSON shape")

    drafts: list[TripDraft] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        drafts.append(
            TripDraft(
                departure=str(item.get("departure") or ""),
                arrival=str(item.get("arrival") or ""),
            )
        )

    return normalize_extracted(drafts)


class TripExtractor(Protocol):
    """Protocol for screenshot extractors."""

    async def extract(self, *, image_base64: str, mime_type: str) -> ExtractionResult:
        """Read candidate trips from an image.

        Args:
            image_base64: Base64-encoded image bytes
            mime_type: Image MIME type, e.g. "image/png"

        Returns:
            ExtractionResult with zero or more candidate rows
        """
        ...


class StubTripExtractor:
    """Extractor used when no model is configured; finds nothing."""

    async def extract(self, *, image_base64: str, mime_type: str) -> ExtractionResult:
        """Return an empty result."""
        return ExtractionResult(trips=[], source="stub")


class OpenAIVisionExtractor:
    """OpenAI vision-backed extractor."""

    def __init__(self, api_key: str, model: str = "gpt-4o"):
        self.client = AsyncOpenAI(api_key=api_key)
        self.model = model

    async def extract(self, *, image_base64: str, mime_type: str) -> ExtractionResult:
        """Extract trips using OpenAI API.

        Raises:
            TripExtractionError: If the API call fails or the answer is malformed
        """
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": EXTRACTION_PROMPT},
                            {
                                "type": "image_url",
                                "image_url": {"url": f"data:{mime_type};base64,{image_base64}"},
                            },
                        ],
                    }
                ],
                response_format={"type": "json_object"},
                temperature=0,
            )
        except Exception as e:
            logger.error(f"OpenAI extraction call failed: {e}")
            raise TripExtractionError("Image analysis failed") from e

        if not response.choices:
            logger.error("OpenAI extraction returned no choices")
            raise TripExtractionError("Image analysis returned no answer")

        content = response.choices[0].message.content or ""
        drafts = parse_extraction_payload(content)
        logger.info(f"Extracted {len(drafts)} trip(s) from image")
        return ExtractionResult(trips=drafts, source="openai")


def get_trip_extractor() -> TripExtractor:
    """Factory function to get appropriate extractor based on config."""
    api_key = settings.openai_api_key

    if api_key and api_key.get_secret_value():
        return OpenAIVisionExtractor(
            api_key=api_key.get_secret_value(),
            model=settings.openai_vision_model,
        )

    logger.warning("No OpenAI API key configured, using stub trip extractor")
    return StubTripExtractor()
