import json
import logging
from typing import Any, Dict, List, Optional, Protocol, Sequence

import requests
from pydantic import BaseModel, ValidationError

from schemas import FormattingCheck, Recommendation
from .prompts import (
    FORMATTING_SYSTEM_PROMPT,
    FORMATTING_USER_TEMPLATE,
    KEYWORDS_SYSTEM_PROMPT,
    KEYWORDS_USER_TEMPLATE,
    RECOMMENDATIONS_SYSTEM_PROMPT,
    RECOMMENDATIONS_USER_TEMPLATE,
)

logger = logging.getLogger(__name__)


class OracleError(Exception):
    """The LLM call failed or returned something we cannot use."""


class KeywordOracle(Protocol):
    def extract_keywords(self, text: str) -> List[str]: ...

    def generate_recommendations(self, resume_text: str, jd_text: str,
                                 missing_keywords: Sequence[str]) -> List[Recommendation]: ...

    def analyze_formatting(self, resume_text: str) -> List[FormattingCheck]: ...


# Response envelopes
class _KeywordsReply(BaseModel):
    keywords: List[Any] = []


class _RecommendationsReply(BaseModel):
    recommendations: List[Recommendation] = []


class _FormattingReply(BaseModel):
    checks: List[FormattingCheck] = []


def clean_keywords(raw: List[Any]) -> List[str]:
    """Keep non-blank strings, drop case-insensitive duplicates, preserve order."""
    seen = set()
    keywords = []
    for item in raw:
        if not isinstance(item, str):
            continue
        kw = item.strip()
        if not kw or kw.lower() in seen:
            continue
        seen.add(kw.lower())
        keywords.append(kw)
    return keywords


class LLMClient:
    """OpenAI-compatible chat-completions client (Groq by default).

    Every public method fails soft: on any error it logs a warning and
    returns an empty list.
    """

    def __init__(self, api_key: str, model: str, base_url: str, timeout: float = 60.0,
                 session: Optional[requests.Session] = None):
        if not api_key:
            raise ValueError("api_key is required")
        self.model = model
        self.url = f"{base_url.rstrip('/')}/chat/completions"
        self.timeout = timeout
        self.session = session or requests.Session()
        self.headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

    @classmethod
    def from_settings(cls, settings) -> "LLMClient":
        return cls(
            api_key=settings.require_api_key(),
            model=settings.model_name,
            base_url=settings.llm_base_url,
            timeout=settings.llm_timeout,
        )

    def _complete_json(self, system_prompt: str, user_prompt: str) -> Dict[str, Any]:
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": 0.2,
            "response_format": {"type": "json_object"},
        }
        try:
            response = self.session.post(self.url, headers=self.headers, json=payload, timeout=self.timeout)
            response.raise_for_status()
            raw = response.json()["choices"][0]["message"]["content"]
        except requests.RequestException as e:
            raise OracleError(f"request failed: {e}") from e
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise OracleError(f"unexpected response shape: {e}") from e

        # Some providers hand back an already-decoded object
        if isinstance(raw, str):
            try:
                parsed = json.loads(raw)
            except json.JSONDecodeError as e:
                raise OracleError(f"reply is not JSON: {e}") from e
        else:
            parsed = raw

        if not isinstance(parsed, dict):
            raise OracleError(f"reply is {type(parsed).__name__}, expected an object")
        return parsed

    def extract_keywords(self, text: str) -> List[str]:
        try:
            parsed = self._complete_json(KEYWORDS_SYSTEM_PROMPT, KEYWORDS_USER_TEMPLATE.format(text=text))
            return clean_keywords(_KeywordsReply.model_validate(parsed).keywords)
        except (OracleError, ValidationError) as e:
            logger.warning(f"Keyword extraction unavailable: {e}")
            return []

    def generate_recommendations(self, resume_text: str, jd_text: str,
                                 missing_keywords: Sequence[str]) -> List[Recommendation]:
        prompt = RECOMMENDATIONS_USER_TEMPLATE.format(
            resume=resume_text, jd=jd_text, missing=", ".join(missing_keywords) or "none",
        )
        try:
            parsed = self._complete_json(RECOMMENDATIONS_SYSTEM_PROMPT, prompt)
            return _RecommendationsReply.model_validate(parsed).recommendations
        except (OracleError, ValidationError) as e:
            logger.warning(f"Recommendation generation unavailable: {e}")
            return []

    def analyze_formatting(self, resume_text: str) -> List[FormattingCheck]:
        try:
            parsed = self._complete_json(FORMATTING_SYSTEM_PROMPT, FORMATTING_USER_TEMPLATE.format(resume=resume_text))
            return _FormattingReply.model_validate(parsed).checks
        except (OracleError, ValidationError) as e:
            logger.warning(f"Formatting analysis unavailable: {e}")
            return []
