"""Two-stage curation of candidate URLs by an external text-generation model.

Stage one (:meth:`Curator.narrow_down`) reduces the sampled sitemap
population to a short list; stage two (:meth:`Curator.select_and_categorize`)
looks at the head fragment of each survivor and returns the final pages with a
category label. Both calls fail closed: any transport problem raises
:class:`~page_scout.errors.LLMError`, any unusable answer raises
:class:`~page_scout.errors.FormatError`.

The pipeline only depends on the :class:`Curator` protocol, so tests (or a
different model vendor) can plug in their own implementation.
"""
from __future__ import annotations

import json
import os
import re
from functools import partial
from typing import Any, Callable, List, Mapping, Optional, Protocol, Sequence, Union

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import HumanMessage
from langchain_google_genai import ChatGoogleGenerativeAI
from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from page_scout.config import CurationConfig
from page_scout.errors import FormatError, LLMError
from page_scout.logger import get_logger

__all__ = [
    "CuratedPage",
    "Curator",
    "GeminiCurator",
    "STAGE_NARROW",
    "STAGE_CATEGORIZE",
    "strip_code_fence",
    "parse_json_payload",
    "message_text",
]

log = get_logger("curation")

STAGE_NARROW = "narrow"
STAGE_CATEGORIZE = "categorize"
API_KEY_ENV = "GEMINI_API_KEY"

_FENCE_RE = re.compile(r"^```[\w-]*\s*(.*?)\s*```$", re.DOTALL)

NARROW_PROMPT = (
    "From the following list of URLs, select the {count} most relevant URLs "
    "for a site with the category '{category}'. Prefer pages that look like "
    "distinct page types (home, listings, detail pages, forms, help).\n\n"
    "URLs:\n{urls}\n\n"
    "Return only a JSON array of the selected URL strings, copied exactly. "
    'For example: ["https://example.com/", "https://example.com/about"]'
)

SELECT_PROMPT_HEADER = (
    "From the following list of URLs and their HTML head sections, select the "
    "{count} most relevant URLs for a site with the category '{category}'. "
    "For each selected URL, assign a relevant category.\n\n"
)

SELECT_PROMPT_FOOTER = (
    "Return the result as a JSON array of objects, where each object has 'url' "
    "and 'category' keys. For example: "
    '[{"url": "https://example.com", "category": "e-commerce"}]'
)


class CuratedPage(BaseModel):
    """One entry of the stage-two answer."""
    model_config = ConfigDict(extra="ignore")

    url: str
    category: str


_URL_LIST = TypeAdapter(List[str])
_PAGE_LIST = TypeAdapter(List[CuratedPage])


class Curator(Protocol):
    """Interface the discovery pipeline needs from a curation backend."""

    async def narrow_down(self, urls: Sequence[str], category: str) -> List[str]:
        ...

    async def select_and_categorize(
        self, urls: Sequence[str], heads: Mapping[str, str], category: str
    ) -> List[CuratedPage]:
        ...


# --------------------------------------------------------------------------- #
# Response parsing                                                            #
# --------------------------------------------------------------------------- #


def strip_code_fence(text: str) -> str:
    """Remove a surrounding markdown code fence (```` ``` ```` or ```` ```json ````)."""
    text = text.strip()
    match = _FENCE_RE.match(text)
    return match.group(1) if match else text


def parse_json_payload(text: str, adapter: TypeAdapter, stage: str) -> Any:
    """Decode *text* as JSON and validate it with *adapter*, or raise FormatError."""
    payload = strip_code_fence(text)
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise FormatError(stage, f"response is not valid JSON: {exc}") from exc
    try:
        return adapter.validate_python(data)
    except ValidationError as exc:
        raise FormatError(stage, f"unexpected response shape: {exc.error_count()} error(s)") from exc


def _category_hint(category: str) -> str:
    return category.strip() or "general"


# --------------------------------------------------------------------------- #
# Gemini implementation                                                       #
# --------------------------------------------------------------------------- #

ChatFactory = Callable[[int], BaseChatModel]


class GeminiCurator:
    """:class:`Curator` backed by a Gemini chat model (``langchain-google-genai``).

    Every call is a single stateless request with a one-message conversation;
    structured output is requested through ``response_mime_type``. Each stage
    has its own model instance because the output token limits differ.
    *chat_factory* builds a chat model for a given token limit and replaces
    :class:`ChatGoogleGenerativeAI` when set.
    """

    def __init__(
        self,
        config: CurationConfig,
        *,
        narrow_size: int = 15,
        narrow_limit: int = 20,
        result_size: int = 10,
        chat_factory: Optional[ChatFactory] = None,
    ) -> None:
        self.config = config
        self.narrow_size = narrow_size
        self.narrow_limit = narrow_limit
        self.result_size = result_size
        if chat_factory is None:
            key = config.api_key.get_secret_value() if config.api_key else os.environ.get(API_KEY_ENV, "")
            if not key:
                raise LLMError("setup", f"{API_KEY_ENV} not set")
            chat_factory = partial(self._gemini_chat, key)
        self._narrow_llm = chat_factory(config.narrow_max_tokens)
        self._select_llm = chat_factory(config.select_max_tokens)

    def _gemini_chat(self, api_key: str, max_tokens: int) -> BaseChatModel:
        return ChatGoogleGenerativeAI(
            model=self.config.model,
            google_api_key=api_key,
            temperature=self.config.temperature,
            max_output_tokens=max_tokens,
            response_mime_type="application/json",
            timeout=self.config.request_timeout,
            max_retries=self.config.max_retries,
        )

    async def narrow_down(self, urls: Sequence[str], category: str) -> List[str]:
        prompt = NARROW_PROMPT.format(
            count=self.narrow_size,
            category=_category_hint(category),
            urls="\n".join(urls),
        )
        text = await self._generate(self._narrow_llm, STAGE_NARROW, prompt)
        selected: List[str] = parse_json_payload(text, _URL_LIST, STAGE_NARROW)
        if len(selected) > self.narrow_limit:
            log.info("Stage %s returned %d URLs, keeping %d", STAGE_NARROW, len(selected), self.narrow_limit)
        return selected[: self.narrow_limit]

    async def select_and_categorize(
        self, urls: Sequence[str], heads: Mapping[str, str], category: str
    ) -> List[CuratedPage]:
        parts = [SELECT_PROMPT_HEADER.format(count=self.result_size, category=_category_hint(category))]
        for url in urls:
            parts.append(f"URL: {url}\nHead:\n{heads.get(url, '')}\n\n")
        parts.append(SELECT_PROMPT_FOOTER)
        text = await self._generate(self._select_llm, STAGE_CATEGORIZE, "".join(parts))
        pages: List[CuratedPage] = parse_json_payload(text, _PAGE_LIST, STAGE_CATEGORIZE)
        if len(pages) > self.result_size:
            log.info("Stage %s returned %d pages, keeping %d", STAGE_CATEGORIZE, len(pages), self.result_size)
        return pages[: self.result_size]

    async def _generate(self, llm: BaseChatModel, stage: str, prompt: str) -> str:
        log.debug("Curation %s: %d prompt chars -> %s", stage, len(prompt), self.config.model)
        try:
            message = await llm.ainvoke([HumanMessage(content=prompt)])
        except Exception as exc:
            raise LLMError(stage, f"failed to call LLM: {exc!r}") from exc
        return message_text(message.content, stage)


def message_text(content: Union[str, List[Any]], stage: str) -> str:
    """Flatten chat message content (a string or a list of parts) to text."""
    if isinstance(content, list):
        content = "".join(
            part if isinstance(part, str) else str(part.get("text", ""))
            for part in content
            if isinstance(part, (str, dict))
        )
    if not isinstance(content, str) or not content.strip():
        raise FormatError(stage, "LLM response text is empty")
    return content
