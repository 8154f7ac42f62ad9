import asyncio
import logging
from typing import Callable, List, Optional, TypeVar

from schemas import AnalysisResult
from .gaps import compute_gaps
from .keywords import match_keywords
from .llm_client import KeywordOracle
from .scorer import composite_score

logger = logging.getLogger(__name__)

T = TypeVar("T")


class AnalysisFailedError(Exception):
    """Analysis could not produce a complete result."""


class AnalysisEngine:
    """Scores a resume against a job description.

    Oracle calls run in worker threads; a failure or timeout of any single
    oracle call degrades to an empty list. Anything else is raised as
    AnalysisFailedError and no partial result is returned.
    """

    def __init__(self, oracle: KeywordOracle, timeout: Optional[float] = None):
        self.oracle = oracle
        self.timeout = timeout

    async def _ask(self, name: str, fn: Callable[..., List[T]], *args) -> List[T]:
        try:
            result = await asyncio.wait_for(asyncio.to_thread(fn, *args), self.timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Oracle call {name} timed out after {self.timeout}s")
            return []
        except Exception as e:
            logger.warning(f"Oracle call {name} failed: {e}")
            return []
        if not isinstance(result, list):
            raise TypeError(f"oracle {name} returned {type(result).__name__}, expected list")
        return result

    async def analyze(self, resume_text: str, jd_text: str) -> AnalysisResult:
        try:
            resume_keywords, job_keywords = await asyncio.gather(
                self._ask("extract_keywords(resume)", self.oracle.extract_keywords, resume_text),
                self._ask("extract_keywords(job)", self.oracle.extract_keywords, jd_text),
            )
            logger.info(f"Keywords extracted: resume={len(resume_keywords)} job={len(job_keywords)}")

            found, missing = match_keywords(resume_keywords, job_keywords)
            scores = composite_score(resume_text, resume_keywords, job_keywords, found)

            recommendations, formatting_checks = await asyncio.gather(
                self._ask("generate_recommendations", self.oracle.generate_recommendations,
                          resume_text, jd_text, missing),
                self._ask("analyze_formatting", self.oracle.analyze_formatting, resume_text),
            )

            return AnalysisResult(
                overall_score=scores["overall"],
                keyword_match_score=scores["keyword_match"],
                format_score=scores["format"],
                skills_match_score=scores["skills_match"],
                found_keywords=found,
                missing_keywords=missing,
                recommendations=recommendations,
                formatting_checks=formatting_checks,
                skills_gap=compute_gaps(resume_keywords, job_keywords),
            )
        except Exception as e:
            logger.error(f"Error during resume analysis: {e}", exc_info=True)
            raise AnalysisFailedError("Failed to analyze resume") from e
