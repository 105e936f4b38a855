"""Fact checking with Tavily search and LLM verdicts.

Claims are extracted from the article by an LLM, each claim is searched
with the Tavily API, and the LLM judges the claim against the search
results. Without a Tavily API key, placeholder search results are used
so the stage still completes (every verdict then ends up low-confidence).
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import date
from typing import Optional
from urllib.parse import urlparse

import httpx

from ..config.settings import settings
from ..errors import ProviderError
from ..pipeline.models import FactCheckResult, FactCheckSource, FactCheckSummary
from ..prompts import render
from ..utils.llm_client import get_completion_async
from ._parsing import extract_json
from .base import FactCheckProvider

logger = logging.getLogger(__name__)

TAVILY_API_URL = "https://api.tavily.com/search"
MAX_CLAIMS = 5


@dataclass
class SearchHit:
    title: str
    url: str
    content: str
    score: float = 0.0
    published_date: Optional[str] = None


@dataclass
class SearchResult:
    query: str
    hits: list[SearchHit] = field(default_factory=list)
    answer: Optional[str] = None


def extract_claims_simple(content: str) -> list[str]:
    """Fallback claim extraction: sentences that contain a number."""
    claims = []
    for sentence in re.split(r"[。.！!？?]", content):
        sentence = sentence.strip()
        if re.search(r"\d+", sentence) and 20 < len(sentence) < 200:
            claims.append(sentence)
            if len(claims) >= 3:
                break
    return claims


class TavilyFactChecker(FactCheckProvider):
    """Fact checker using Tavily for evidence and a LiteLLM model for verdicts."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model_id: str = settings.fact_check_model,
        timeout: float = 30.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize fact checker.

        Args:
            api_key: Tavily API key (defaults to TAVILY_API_KEY)
            model_id: LiteLLM model used for claim extraction and verdicts
            timeout: HTTP timeout for Tavily requests in seconds
            http_client: Optional shared httpx client
        """
        self.api_key = api_key if api_key is not None else settings.tavily_api_key
        self.model_id = model_id
        self.timeout = timeout
        self._http_client = http_client

    async def extract_claims(self, content: str, topic: str) -> list[str]:
        prompt = render("extract_claims", content=content[:3000], topic=topic)
        try:
            text = await get_completion_async(
                model=self.model_id,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=1024,
                temperature=0.2,
                response_format={"type": "json_object"},
            )
        except Exception as e:
            raise ProviderError("extract_claims", str(e)) from e

        data = extract_json(text)
        if isinstance(data, dict) and isinstance(data.get("claims"), list):
            claims = [str(c).strip() for c in data["claims"] if str(c).strip()]
            return claims[:MAX_CLAIMS]

        logger.warning("[FACTCHECK] Could not parse claims, using simple extraction")
        return extract_claims_simple(content)

    async def verify(self, claims: list[str], content: str, topic: str) -> FactCheckSummary:
        results = []
        for claim in claims:
            search = await self.search(claim)
            results.append(await self._verify_claim(claim, search))

        summary = FactCheckSummary.from_results(results)
        logger.info(
            "[FACTCHECK] %d claims: %d verified, %d incorrect, confidence=%s",
            summary.total_claims,
            summary.verified_claims,
            summary.incorrect_claims,
            summary.overall_confidence,
        )
        return summary

    async def search(self, query: str) -> SearchResult:
        """Search Tavily for evidence about a claim."""
        if not self.api_key:
            logger.warning("[FACTCHECK] TAVILY_API_KEY not set, using placeholder search results")
            return self._placeholder_result(query)

        payload = {
            "api_key": self.api_key,
            "query": query,
            "search_depth": "advanced",
            "include_answer": True,
            "include_raw_content": False,
            "max_results": 5,
        }
        try:
            if self._http_client is not None:
                resp = await self._http_client.post(TAVILY_API_URL, json=payload, timeout=self.timeout)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    resp = await client.post(TAVILY_API_URL, json=payload)
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPError as e:
            raise ProviderError("tavily_search", str(e)) from e

        return SearchResult(
            query=query,
            hits=[
                SearchHit(
                    title=r.get("title") or "",
                    url=r.get("url") or "",
                    content=r.get("content") or "",
                    score=r.get("score") or 0.0,
                    published_date=r.get("published_date"),
                )
                for r in data.get("results") or []
            ],
            answer=data.get("answer"),
        )

    async def _verify_claim(self, claim: str, search: SearchResult) -> FactCheckResult:
        sources = [
            FactCheckSource(
                title=hit.title,
                url=hit.url,
                snippet=hit.content[:200],
                published_date=hit.published_date,
                domain=urlparse(hit.url).hostname or "",
                relevance_score=hit.score,
            )
            for hit in search.hits
        ]
        references = "\n".join(
            f"{i + 1}. {hit.title}\n   URL: {hit.url}\n   Content: {hit.content[:300]}"
            for i, hit in enumerate(search.hits)
        )
        search_answer = f"\nSearch summary: {search.answer}" if search.answer else ""
        prompt = render("verify_claim", claim=claim, references=references, search_answer=search_answer)

        try:
            text = await get_completion_async(
                model=self.model_id,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=512,
                temperature=0.1,
                response_format={"type": "json_object"},
            )
        except Exception as e:
            raise ProviderError("verify_claim", str(e)) from e

        data = extract_json(text)
        if not isinstance(data, dict):
            logger.warning("[FACTCHECK] Unparseable verdict for claim: %s", claim[:60])
            return FactCheckResult(
                claim=claim,
                explanation="Automatic verification failed. Please check manually.",
                sources=sources,
            )

        return FactCheckResult(
            claim=claim,
            is_verified=bool(data.get("is_verified", False)),
            confidence=data.get("confidence") if data.get("confidence") in ("high", "medium", "low") else "low",
            verdict=data.get("verdict")
            if data.get("verdict") in ("correct", "incorrect", "partially-correct", "unverified")
            else "unverified",
            explanation=data.get("explanation") or "",
            suggested_correction=data.get("suggested_correction") or None,
            sources=sources,
        )

    def _placeholder_result(self, query: str) -> SearchResult:
        today = date.today().isoformat()
        return SearchResult(
            query=query,
            hits=[
                SearchHit(
                    title="Placeholder search result",
                    url="https://example.com/1",
                    content=f"Information about {query}. No Tavily API key is configured.",
                    score=0.8,
                    published_date=today,
                ),
            ],
            answer=f"Placeholder answer for {query}. Set TAVILY_API_KEY to enable real fact checks.",
        )
