"""AI/LLM service: question generation via Anthropic Claude, OpenAI or Google Gemini, plus a mock provider."""

import asyncio
import json
import re
import time
from typing import Any, Dict, List

from pydantic import TypeAdapter, ValidationError

from app.config import Settings
from app.schemas.responses import GeneratedQuestion, QuestionContent
from app.services.errors import GenerationError
from app.services.prompt_builder import Prompt
from app.utils.logging_config import get_logger

logger = get_logger("ai")

MOCK_PROVIDER = "mock"
PROVIDERS = ("anthropic", "openai", "gemini", MOCK_PROVIDER)

QUOTA_EXCEEDED_MESSAGE = "The {provider} account has run out of quota or has no billing set up."

MOCK_DISTRACTORS = (
    "To cause side effects in every render",
    "To store global state in Redux",
    "To fetch data from a SOAP API",
)

_FENCE_OPEN = re.compile(r"^```[\w+-]*[ \t]*\n?")
_FENCE_CLOSE = re.compile(r"\n?[ \t]*```$")

_QUESTION_LIST = TypeAdapter(List[GeneratedQuestion])


def _describe_provider_error(provider: str, e: Exception) -> str:
    msg = str(e).lower()
    if "429" in msg or "insufficient_quota" in msg or "quota" in msg or "billing" in msg:
        return QUOTA_EXCEEDED_MESSAGE.format(provider=provider)
    return f"{provider} request failed: {e}"


def strip_code_fences(text: str) -> str:
    """Remove a leading ```json / ``` line and a trailing ``` from model output."""
    text = (text or "").strip()
    text = _FENCE_OPEN.sub("", text, count=1)
    text = _FENCE_CLOSE.sub("", text, count=1)
    return text.strip()


def parse_questions(text: str, count: int) -> List[GeneratedQuestion]:
    """
    Parse the model's JSON array into questions.
    Raises GenerationError on anything that is not a non-empty array of valid questions.
    """
    cleaned = strip_code_fences(text)
    if not cleaned:
        raise GenerationError("Model returned an empty response")
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise GenerationError(f"Model response is not valid JSON: {e}") from e
    if not isinstance(data, list):
        raise GenerationError(f"Model response must be a JSON array, got {type(data).__name__}")
    if not data:
        raise GenerationError("Model returned no questions")
    try:
        questions = _QUESTION_LIST.validate_python(data)
    except ValidationError as e:
        raise GenerationError(f"Model response does not match the question schema: {e}") from e
    return questions[:count]


def mock_questions(record: Dict[str, Any], difficulty: str, count: int) -> List[GeneratedQuestion]:
    """Deterministic questions built from the record; only the ids carry a timestamp."""
    meta = record.get("meta")
    meta = meta if isinstance(meta, dict) else {}
    mental_model = record.get("mental_model")
    mental_model = mental_model if isinstance(mental_model, dict) else {}
    name = record.get("name", "this topic")
    title = meta.get("title") or name
    description = meta.get("description") or f"The purpose described in the {name} documentation"
    summary = mental_model.get("summary")

    stamp = int(time.time() * 1000)
    return [
        GeneratedQuestion(
            id=f"mock-{stamp}-{i}",
            type="multiple_choice",
            content=QuestionContent(
                question_text=(
                    f"[MOCK {difficulty.upper()}] What is the primary purpose of {name}? "
                    f"(Derived from {title})"
                ),
                options=[description, *MOCK_DISTRACTORS],
                correct_answer_index=0,
            ),
            explanation=f'As stated in the documentation: "{summary or "N/A"}"',
        )
        for i in range(count)
    ]


def _gemini_generate_sync(api_key: str, model_name: str, prompt: Prompt, max_tokens: int) -> str:
    """Sync Gemini call (run in executor)."""
    import google.generativeai as genai

    genai.configure(api_key=api_key)
    model = genai.GenerativeModel(model_name, system_instruction=prompt.system)
    response = model.generate_content(
        prompt.user,
        generation_config=genai.types.GenerationConfig(
            max_output_tokens=max_tokens,
            temperature=0.5,
        ),
    )
    if not response or not response.text:
        return ""
    return response.text.strip()


class QuestionGenerator:
    """
    Generates questions with one provider chosen at construction.
    The mock provider needs no credential and is fully deterministic apart from ids.
    """

    def __init__(
        self,
        provider: str = MOCK_PROVIDER,
        *,
        api_key: str = "",
        model: str = "",
        max_tokens: int = 4096,
    ):
        if provider not in PROVIDERS:
            raise ValueError(f"Unknown AI provider: {provider}")
        if provider != MOCK_PROVIDER and not api_key:
            raise ValueError(f"AI provider '{provider}' requires an API key")
        self.provider = provider
        self.api_key = api_key
        self.model = model
        self.max_tokens = max_tokens

    @property
    def use_mock(self) -> bool:
        return self.provider == MOCK_PROVIDER

    async def generate(
        self,
        prompt: Prompt,
        record: Dict[str, Any],
        difficulty: str,
        count: int,
    ) -> List[GeneratedQuestion]:
        if self.use_mock:
            logger.info("No AI credential configured, returning mock questions", count=count)
            return mock_questions(record, difficulty, count)

        try:
            text = await self._complete(prompt)
        except Exception as e:
            logger.exception("AI provider call failed", provider=self.provider, model=self.model)
            raise GenerationError(_describe_provider_error(self.provider, e)) from e

        try:
            questions = parse_questions(text, count)
        except GenerationError as e:
            logger.warning("Failed to parse questions JSON", provider=self.provider, error=str(e), raw=text[:200])
            raise

        logger.info("Questions generated", provider=self.provider, requested=count, returned=len(questions))
        return questions

    async def _complete(self, prompt: Prompt) -> str:
        if self.provider == "anthropic":
            return await self._complete_anthropic(prompt)
        if self.provider == "openai":
            return await self._complete_openai(prompt)
        return await self._complete_gemini(prompt)

    async def _complete_anthropic(self, prompt: Prompt) -> str:
        from anthropic import AsyncAnthropic

        client = AsyncAnthropic(api_key=self.api_key)
        message = await client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            system=prompt.system,
            messages=[{"role": "user", "content": prompt.user}],
        )
        # First text block only; tool-use or other block types are ignored.
        for block in message.content:
            if getattr(block, "type", None) == "text":
                return block.text
        return ""

    async def _complete_openai(self, prompt: Prompt) -> str:
        from openai import AsyncOpenAI

        client = AsyncOpenAI(api_key=self.api_key)
        response = await client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": prompt.system},
                {"role": "user", "content": prompt.user},
            ],
            temperature=0.5,
            max_tokens=self.max_tokens,
        )
        return response.choices[0].message.content or ""

    async def _complete_gemini(self, prompt: Prompt) -> str:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            None,
            lambda: _gemini_generate_sync(self.api_key, self.model, prompt, self.max_tokens),
        )


def _provider_credentials(settings: Settings) -> Dict[str, tuple]:
    return {
        "anthropic": (settings.anthropic_api_key, settings.anthropic_model),
        "openai": (settings.openai_api_key, settings.openai_model),
        "gemini": (settings.gemini_api_key, settings.gemini_model),
    }


def build_question_generator(settings: Settings) -> QuestionGenerator:
    """
    Pick the provider from settings.
    "auto" takes the first provider with an API key; a provider without its key falls back to mock.
    """
    provider = (settings.ai_provider or "auto").strip().lower()
    credentials = _provider_credentials(settings)

    if provider == "auto":
        provider = next((name for name, (key, _) in credentials.items() if key), MOCK_PROVIDER)
    elif provider != MOCK_PROVIDER and provider in credentials and not credentials[provider][0]:
        logger.warning("AI provider has no API key, using mock questions", provider=provider)
        provider = MOCK_PROVIDER

    if provider == MOCK_PROVIDER:
        return QuestionGenerator(MOCK_PROVIDER)
    if provider not in credentials:
        raise ValueError(f"Unknown AI provider: {provider}. Use one of: auto, {', '.join(PROVIDERS)}")

    api_key, model = credentials[provider]
    return QuestionGenerator(provider, api_key=api_key, model=model, max_tokens=settings.max_output_tokens)
