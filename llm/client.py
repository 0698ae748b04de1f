"""Multi-provider LLM client with fallback support"""

import asyncio
import logging
from typing import Optional, List, Dict

import anthropic
import openai
from google import genai

from core.exceptions import LLMError
from core.enums import LLMProvider
from config import settings

logger = logging.getLogger(__name__)


class LLMClient:
    """Multi-provider LLM client with automatic fallback"""

    def __init__(self):
        self.providers = self._initialize_providers()
        self.provider_priority = settings.get_llm_provider_priority()
        self.max_retries = settings.LLM_MAX_RETRIES
        self.retry_delay = settings.LLM_RETRY_DELAY
        self.timeout = settings.LLM_TIMEOUT

    def _initialize_providers(self) -> dict:
        """Initialize LLM providers that have an API key"""
        providers = {}

        if settings.OPENAI_API_KEY:
            providers[LLMProvider.OPENAI] = openai.OpenAI(
                api_key=settings.OPENAI_API_KEY,
                timeout=settings.LLM_TIMEOUT
            )

        if settings.ANTHROPIC_API_KEY:
            providers[LLMProvider.ANTHROPIC] = anthropic.Anthropic(
                api_key=settings.ANTHROPIC_API_KEY,
                timeout=settings.LLM_TIMEOUT
            )

        if settings.GOOGLE_API_KEY:
            providers[LLMProvider.GEMINI] = genai.Client(api_key=settings.GOOGLE_API_KEY)

        if not providers:
            raise LLMError(
                "No LLM providers available. "
                "Please configure at least one API key."
            )

        return providers

    def _get_available_providers(self) -> List[LLMProvider]:
        """Get list of available providers in priority order"""
        available = []
        for provider_name in self.provider_priority:
            try:
                provider = LLMProvider(provider_name)
                if provider in self.providers:
                    available.append(provider)
            except ValueError:
                continue
        return available

    async def complete(
        self,
        prompt: str,
        system: Optional[str] = None,
        history: Optional[List[Dict[str, str]]] = None,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None
    ) -> str:
        """
        Send completion request with automatic fallback

        Args:
            prompt: User prompt
            system: System prompt
            history: Previous turns as {"role": "user"|"assistant", "content": ...}
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature

        Returns:
            Response text

        Raises:
            LLMError: If all providers fail
        """
        max_tokens = max_tokens or settings.LLM_MAX_TOKENS
        temperature = settings.LLM_TEMPERATURE if temperature is None else temperature
        messages = list(history or []) + [{"role": "user", "content": prompt}]
        available_providers = self._get_available_providers()

        if not available_providers:
            raise LLMError("No available LLM providers")

        last_error = None

        # Try each provider in priority order
        for provider in available_providers:
            for attempt in range(self.max_retries):
                try:
                    text = await self._call_provider(
                        provider=provider,
                        messages=messages,
                        system=system or self._default_system_prompt(),
                        max_tokens=max_tokens,
                        temperature=temperature
                    )
                    # OpenAI reports refusals with content=None
                    if not text:
                        raise LLMError(
                            f"{provider.value} returned an empty response",
                            provider=provider.value
                        )
                    return text
                except Exception as e:
                    last_error = e
                    logger.warning(
                        "%s attempt %d/%d failed: %s",
                        provider.value, attempt + 1, self.max_retries, e
                    )
                    if attempt < self.max_retries - 1:
                        await asyncio.sleep(self.retry_delay * (2 ** attempt))

        # All providers failed
        logger.error("All LLM providers failed: %s", last_error)
        raise LLMError(
            f"All LLM providers failed. Last error: {last_error}",
            provider=available_providers[-1].value,
            retries=self.max_retries
        )

    async def _call_provider(
        self,
        provider: LLMProvider,
        messages: List[Dict[str, str]],
        system: str,
        max_tokens: int,
        temperature: float
    ) -> str:
        """Call specific LLM provider"""
        if provider == LLMProvider.OPENAI:
            return await self._call_openai(messages, system, max_tokens, temperature)
        elif provider == LLMProvider.ANTHROPIC:
            return await self._call_anthropic(messages, system, max_tokens, temperature)
        elif provider == LLMProvider.GEMINI:
            return await self._call_gemini(messages, system, max_tokens, temperature)
        else:
            raise LLMError(f"Unknown provider: {provider}")

    async def _call_openai(
        self,
        messages: List[Dict[str, str]],
        system: str,
        max_tokens: int,
        temperature: float
    ) -> str:
        """Call OpenAI API"""
        client = self.providers[LLMProvider.OPENAI]

        # Run in executor to avoid blocking
        loop = asyncio.get_running_loop()
        response = await loop.run_in_executor(
            None,
            lambda: client.chat.completions.create(
                model=settings.OPENAI_MODEL,
                max_tokens=max_tokens,
                messages=[{"role": "system", "content": system}] + messages,
                temperature=temperature
            )
        )

        return response.choices[0].message.content

    async def _call_anthropic(
        self,
        messages: List[Dict[str, str]],
        system: str,
        max_tokens: int,
        temperature: float
    ) -> str:
        """Call Anthropic Claude API"""
        client = self.providers[LLMProvider.ANTHROPIC]

        loop = asyncio.get_running_loop()
        response = await loop.run_in_executor(
            None,
            lambda: client.messages.create(
                model=settings.ANTHROPIC_MODEL,
                max_tokens=max_tokens,
                system=system,
                messages=messages,
                temperature=temperature
            )
        )

        return response.content[0].text

    async def _call_gemini(
        self,
        messages: List[Dict[str, str]],
        system: str,
        max_tokens: int,
        temperature: float
    ) -> str:
        """Call Google Gemini API"""
        client = self.providers[LLMProvider.GEMINI]

        # Gemini gets the conversation flattened into one prompt
        transcript = "\n\n".join(
            f"{message['role'].upper()}: {message['content']}" for message in messages
        )
        full_prompt = f"{system}\n\n{transcript}"

        loop = asyncio.get_running_loop()
        response = await loop.run_in_executor(
            None,
            lambda: client.models.generate_content(
                model=settings.GEMINI_MODEL_ID,
                contents=full_prompt,
                config={
                    "max_output_tokens": max_tokens,
                    "temperature": temperature
                }
            )
        )
        return response.text

    def _default_system_prompt(self) -> str:
        """Default system prompt for LLM tasks"""
        return (
            "You are an AI assistant specialized in analyzing spreadsheet data. "
            "Keep responses concise but informative."
        )
