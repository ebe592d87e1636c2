from typing import Any, Dict, List, Optional, Union
from openai import AsyncOpenAI, OpenAIError
from ember.config import settings
from ember.logging import setup_logger
from ember.services.focus.errors import GenerationFailedError, UnconfiguredError


class AsyncOpenAIService:
    """Service for interacting with OpenAI API"""

    def __init__(self, api_key: Optional[str] = None):
        self.logger = setup_logger(__name__)
        api_key = (api_key if api_key is not None else settings.OPENAI_API_KEY).strip()
        if not api_key:
            raise UnconfiguredError("OpenAI API key not provided.")

        self._client = AsyncOpenAI(
            api_key=api_key,
            timeout=settings.OPENAI_TIMEOUT,
            max_retries=settings.OPENAI_MAX_RETRIES,
        )

    async def create_chat_completion(
        self,
        messages: List[Dict[str, Union[str, Any]]],
        model: str = settings.OPENAI_MODEL,
        **kwargs: Any,
    ) -> str:
        """Create a chat completion and return its text"""
        kwargs.setdefault("temperature", settings.OPENAI_TEMPERATURE)
        try:
            self.logger.info(f"Creating chat completion with model {model}")
            completion = await self._client.chat.completions.create(
                model=model,
                messages=messages,
                **kwargs,
            )
        except OpenAIError as e:
            self.logger.error(f"Error creating chat completion: {e}")
            raise GenerationFailedError(f"Chat completion failed: {e}") from e

        content = completion.choices[0].message.content if completion.choices else None
        if not content or not content.strip():
            raise GenerationFailedError("Chat completion returned no content")
        return content
