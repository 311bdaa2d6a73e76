"""Residency assistant with OpenAI integration.

Security: Reads API key from environment only, never hardcoded.
Provides deterministic fallback when no key present for testing.
"""

import logging
from datetime import date
from typing import Protocol

from openai import AsyncOpenAI

from backend.app.config import settings
from backend.app.models.assistant import AssistantReply, ChatMessage
from backend.app.models.residency import ResidencyStatus
from backend.app.residency.dates import format_dmy

logger = logging.getLogger(__name__)

# Turns of history forwarded to the model
MAX_HISTORY_MESSAGES = 20


def build_greeting(status: ResidencyStatus, calculation_date: date | None, country: str) -> str:
    """Opening message shown when a chat starts."""
    suggested_days = status.days_needed if status.days_needed > 0 else 7
    return (
        f"Hi! I'm your AI helper. Your status is calculated for {format_dmy(calculation_date)}. "
        f'How can I help? For example, you can ask "Where should I go in {country} '
        f'for {suggested_days} days?"'
    )


def build_system_prompt(
    status: ResidencyStatus, calculation_date: date | None, country: str, language: str
) -> str:
    """System prompt carrying the user's residency status."""
    return (
        f"You are a helpful assistant for a person who lives in {country} and tracks "
        f"their days of presence for a residence permit.\n"
        f"The user is calculating as of {format_dmy(calculation_date)}.\n"
        f"Their status on that date: they spent {status.days_in} days in {country} over "
        f"the preceding year and need {status.days_needed} more days to reach the "
        f"183-day requirement.\n"
        f"Answer questions in this context. Be brief and helpful. "
        f"Always answer in {language}."
    )


class AssistantClient(Protocol):
    """Protocol for assistant client implementations."""

    async def reply(
        self,
        *,
        message: str,
        history: list[ChatMessage],
        status: ResidencyStatus,
        calculation_date: date | None,
    ) -> AssistantReply:
        """Answer a user message in the context of the residency status.

        Args:
            message: New user message
            history: Previous turns, oldest first
            status: Residency status on the calculation date
            calculation_date: Date the status was calculated for

        Returns:
            AssistantReply with the answer text
        """
        ...


class DeterministicStubAssistant:
    """Deterministic stub assistant for testing (no API key required)."""

    def __init__(self, country: str = "Georgia") -> None:
        self.country = country

    async def reply(
        self,
        *,
        message: str,
        history: list[ChatMessage],
        status: ResidencyStatus,
        calculation_date: date | None,
    ) -> AssistantReply:
        """Generate deterministic stub answer."""
        if status.days_needed > 0:
            outlook = f"You still need {status.days_needed} more day(s) in {self.country}."
        else:
            outlook = "You currently meet the 183-day requirement."

        text = (
            f"As of {format_dmy(calculation_date)} you have spent {status.days_in} day(s) "
            f"in {self.country} over the past year. {outlook}\n\n"
            f"*This is a stub response generated without an AI model.*"
        )
        return AssistantReply(text=text, source="stub")


class OpenAIAssistantClient:
    """OpenAI-backed assistant."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        country: str = "Georgia",
        language: str = "English",
    ):
        """Initialize OpenAI client.

        Args:
            api_key: OpenAI API key (read from environment)
            model: Model name to use
            country: Country of residence named in the prompt
            language: Language the assistant answers in
        """
        self.client = AsyncOpenAI(api_key=api_key)
        self.model = model
        self.country = country
        self.language = language

    async def reply(
        self,
        *,
        message: str,
        history: list[ChatMessage],
        status: ResidencyStatus,
        calculation_date: date | None,
    ) -> AssistantReply:
        """Generate answer using OpenAI API."""
        messages = [
            {
                "role": "system",
                "content": build_system_prompt(
                    status, calculation_date, self.country, self.language
                ),
            }
        ]
        for turn in history[-MAX_HISTORY_MESSAGES:]:
            messages.append({"role": turn.role, "content": turn.text})
        messages.append({"role": "user", "content": message})

        stub = DeterministicStubAssistant(country=self.country)

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=messages,  # type: ignore[arg-type]
                temperature=0.7,
                max_tokens=800,
            )

            text = response.choices[0].message.content or ""

            if not text.strip():
                logger.warning("OpenAI returned empty response, using deterministic stub fallback")
                return await stub.reply(
                    message=message,
                    history=history,
                    status=status,
                    calculation_date=calculation_date,
                )

            return AssistantReply(text=text, source="openai")

        except Exception as e:
            logger.error(f"OpenAI API call failed: {e}")
            logger.warning("Falling back to deterministic stub assistant")
            return await stub.reply(
                message=message,
                history=history,
                status=status,
                calculation_date=calculation_date,
            )


def get_assistant_client() -> AssistantClient:
    """Factory function to get appropriate assistant based on config.

    Returns:
        OpenAIAssistantClient if API key is configured, DeterministicStubAssistant otherwise
    """
    api_key = settings.openai_api_key

    if api_key and api_key.get_secret_value():
        logger.info("Using OpenAI client for assistant")
        return OpenAIAssistantClient(
            api_key=api_key.get_secret_value(),
            model=settings.openai_model,
            country=settings.residence_country,
            language=settings.assistant_language,
        )
    else:
        logger.warning("No OpenAI API key configured, using deterministic stub assistant")
        return DeterministicStubAssistant(country=settings.residence_country)
