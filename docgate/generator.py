"""Answer generation through the Gemini completion API."""

import asyncio
import logging

from google import genai
from google.genai import types

logger = logging.getLogger(__name__)


class AnswerGenerator:
    def __init__(self, api_key: str, model: str = "gemini-2.5-flash", temperature: float = 0.2):
        if not api_key:
            raise RuntimeError("GEMINI_API_KEY not found in environment")
        self.client = genai.Client(api_key=api_key)
        self.model = model
        self.temperature = temperature

    def complete(self, system: str, user: str) -> str:
        response = self.client.models.generate_content(
            model=self.model,
            contents=user,
            config=types.GenerateContentConfig(
                system_instruction=system,
                temperature=self.temperature,
            ),
        )
        answer = (response.text or "").strip()
        logger.info(f"LLM response received | answer_length={len(answer)}")
        return answer

    async def complete_async(self, system: str, user: str) -> str:
        return await asyncio.to_thread(self.complete, system, user)
