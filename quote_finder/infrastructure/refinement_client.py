# quote_finder/infrastructure/refinement_client.py

import json
from typing import Optional

from openai import OpenAI, OpenAIError

from quote_finder.domain.errors import RefinementUnavailable
from quote_finder.domain.interfaces import RefinementPort
from quote_finder.infrastructure.prompts import build_system_prompt, build_user_prompt


DEFAULT_MODEL = "gpt-4.1-nano"
DEFAULT_TEMPERATURE = 0.1


class OpenAIRefinementClient(RefinementPort):
    """Chat Completions client that asks the model to pick the final quotes."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_MODEL,
        temperature: float = DEFAULT_TEMPERATURE,
        client: Optional[OpenAI] = None,
    ):
        self._model = model
        self._temperature = temperature
        self._client = client or OpenAI(api_key=api_key)

    @property
    def model(self) -> str:
        return self._model

    def refine(self, topic: str, candidate_text: str, is_ocr: bool = False) -> str:
        try:
            response = self._client.chat.completions.create(
                model=self._model,
                messages=[
                    {"role": "system", "content": build_system_prompt(is_ocr)},
                    {"role": "user", "content": build_user_prompt(topic, candidate_text)},
                ],
                temperature=self._temperature,
            )
        except OpenAIError as error:
            raise RefinementUnavailable(f"Refinement model call failed: {error}") from error

        return (response.choices[0].message.content or "").strip()


class EchoRefinementClient(RefinementPort):
    """
    Offline stand-in used when no API key is configured.
    Echoes every candidate segment back as a quote.
    """

    model = "echo-dev"

    def refine(self, topic: str, candidate_text: str, is_ocr: bool = False) -> str:
        segments = [part.strip() for part in candidate_text.split("\n\n") if part.strip()]
        return json.dumps(segments)
