"""External ranking judges that may reorder locally ranked candidates."""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

import google.generativeai as genai
import requests
from pydantic import BaseModel, ValidationError

from recommender_app.config import DEFAULT_GEMINI_MODEL

LOGGER = logging.getLogger(__name__)

_DESCRIBED_FIELDS = (
    ("Category", "category"),
    ("Color", "color"),
    ("Style", "style"),
    ("Pattern", "pattern"),
    ("Material", "material"),
    ("Occasion", "occasion"),
    ("Season", "season"),
    ("Fit", "fit"),
    ("Neckline", "neckline"),
    ("Sleeve Length", "sleeve_length"),
    ("Formality Score", "formality_score"),
)


class JudgeUnavailableError(RuntimeError):
    """Raised when a judge cannot produce a usable ranking."""


class JudgeResponse(BaseModel):
    ranked_ids: List[str]


class RankingJudge(ABC):
    """Single-capability interface: order candidate ids best to worst."""

    name = "judge"

    @abstractmethod
    def rank(self, primary_item: Dict[str, Any], candidate_items: Sequence[Dict[str, Any]]) -> List[str]:
        """Return candidate ids ordered best to worst or raise :class:`JudgeUnavailableError`."""


def parse_judge_payload(payload: Any) -> List[str]:
    """Validate a ``{"ranked_ids": [...]}`` payload or raise :class:`JudgeUnavailableError`."""

    try:
        parsed = JudgeResponse.model_validate(payload)
    except ValidationError as exc:
        raise JudgeUnavailableError("judge payload failed schema validation") from exc
    return parsed.ranked_ids


def strip_code_fence(text: str) -> str:
    """Remove a markdown code block wrapper around a JSON reply."""

    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = cleaned[3:]
        if cleaned.lower().startswith("json"):
            cleaned = cleaned[4:]
        if cleaned.rstrip().endswith("```"):
            cleaned = cleaned.rstrip()[:-3]
    return cleaned.strip()


def _describe_item(item: Dict[str, Any]) -> List[str]:
    lines = [f"- Name: {item.get('name') or 'Not specified'}"]
    for label, key in _DESCRIBED_FIELDS:
        lines.append(f"- {label}: {item.get(key) or 'Not specified'}")
    return lines


def build_ranking_prompt(primary_item: Dict[str, Any], candidate_items: Sequence[Dict[str, Any]]) -> str:
    """Compose the stylist ranking prompt for a primary item and its candidates."""

    sections = [
        "You are an expert fashion stylist. Rank clothing items by how well they complement a primary wardrobe item.",
        "",
        "PRIMARY ITEM:",
        *_describe_item(primary_item),
        "",
        "CANDIDATE ITEMS TO RANK:",
    ]
    for index, item in enumerate(candidate_items, start=1):
        sections.append(f"{index}. ID: {item.get('id')}")
        sections.extend(f"   {line}" for line in _describe_item(item))
        if item.get("price") is not None:
            sections.append(f"   - Price: {item.get('price')}")
    sections.extend(
        [
            "",
            "Rank the candidates from BEST to WORST considering color harmony, style cohesion, occasion, "
            "season, formality, pattern mixing and overall outfit balance.",
            'Respond with ONLY a JSON object in this exact format: {"ranked_ids": [item IDs best to worst]}',
        ]
    )
    return "\n".join(sections)


class GeminiRankingJudge(RankingJudge):
    """Ask a Gemini model for a ranking, with a bounded request timeout."""

    name = "gemini"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_GEMINI_MODEL,
        timeout_seconds: float = 5.0,
    ) -> None:
        self.api_key = api_key
        self.model_name = model
        self.timeout_seconds = timeout_seconds
        self._model = None

    def _get_model(self) -> Any:
        if self._model is None:
            genai.configure(api_key=self.api_key)
            self._model = genai.GenerativeModel(self.model_name)
        return self._model

    def rank(self, primary_item: Dict[str, Any], candidate_items: Sequence[Dict[str, Any]]) -> List[str]:
        if not self.api_key:
            raise JudgeUnavailableError("missing Gemini API key")

        prompt = build_ranking_prompt(primary_item, candidate_items)
        try:
            response = self._get_model().generate_content(
                prompt, request_options={"timeout": self.timeout_seconds}
            )
            text = response.text
        except Exception as exc:  # noqa: BLE001
            raise JudgeUnavailableError(f"Gemini request failed: {exc}") from exc

        try:
            payload = json.loads(strip_code_fence(text))
        except json.JSONDecodeError as exc:
            LOGGER.error("Gemini ranking reply was not JSON", extra={"reply_preview": text[:120]})
            raise JudgeUnavailableError("invalid AI response format") from exc
        return parse_judge_payload(payload)


class HttpRankingJudge(RankingJudge):
    """Delegate ranking to a remote rank-items endpoint."""

    name = "http"

    def __init__(self, url: str, timeout_seconds: float = 5.0, session: requests.Session | None = None) -> None:
        self.url = url
        self.timeout_seconds = timeout_seconds
        self.session = session or requests.Session()

    def rank(self, primary_item: Dict[str, Any], candidate_items: Sequence[Dict[str, Any]]) -> List[str]:
        body = {"primaryItem": primary_item, "candidateItems": list(candidate_items)}
        try:
            response = self.session.post(self.url, json=body, timeout=self.timeout_seconds)
            response.raise_for_status()
            payload = response.json()
        except (requests.Timeout, requests.RequestException) as exc:
            raise JudgeUnavailableError(f"rank-items endpoint unreachable: {exc}") from exc
        except ValueError as exc:
            raise JudgeUnavailableError("rank-items endpoint returned non-JSON body") from exc
        return parse_judge_payload(payload)


class MockRankingJudge(RankingJudge):
    """Offline deterministic judge for tests and local runs.

    Returns ``ranked_ids`` when given, otherwise reverses the candidate order.
    Set ``error`` to simulate a failing judge.
    """

    name = "mock"

    def __init__(self, ranked_ids: Optional[List[str]] = None, error: Exception | None = None) -> None:
        self.ranked_ids = ranked_ids
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    def rank(self, primary_item: Dict[str, Any], candidate_items: Sequence[Dict[str, Any]]) -> List[str]:
        self.calls.append({"primary_item": primary_item, "candidate_items": list(candidate_items)})
        if self.error is not None:
            raise self.error
        if self.ranked_ids is not None:
            return self.ranked_ids
        return [str(item.get("id")) for item in reversed(list(candidate_items))]


__all__ = [
    "JudgeUnavailableError",
    "JudgeResponse",
    "RankingJudge",
    "GeminiRankingJudge",
    "HttpRankingJudge",
    "MockRankingJudge",
    "build_ranking_prompt",
    "parse_judge_payload",
    "strip_code_fence",
]
