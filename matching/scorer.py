from typing import Dict, Sequence
import math

from .keywords import substring_related
from .skills import is_technical

BULLET_GLYPHS = ('●', '•')
SECTION_HEADERS = ['experience', 'education', 'skills', 'summary']
MIN_LENGTH, MAX_LENGTH = 500, 5000


def percent(numerator: int, denominator: int) -> int:
    """numerator / max(denominator, 1) as an integer percentage, rounded half up."""
    ratio = numerator / max(denominator, 1)
    return max(0, min(100, math.floor(ratio * 100 + 0.5)))


def keyword_match_score(found: Sequence[str], job_keywords: Sequence[str]) -> int:
    return percent(len(found), len(job_keywords))


def format_score(resume_text: str) -> int:
    """Rule-based ATS readability score starting from 100.

    Deductions are additive: decorative bullet glyphs (-5), under
    500 characters (-20), over 5000 characters (-10) and fewer than two
    standard section headers (-15).
    """
    score = 100

    if any(glyph in resume_text for glyph in BULLET_GLYPHS):
        score -= 5
    if len(resume_text) < MIN_LENGTH:
        score -= 20
    if len(resume_text) > MAX_LENGTH:
        score -= 10

    text_lower = resume_text.lower()
    headers = [h for h in SECTION_HEADERS if h in text_lower]
    if len(headers) < 2:
        score -= 15

    return max(0, min(100, score))


def skills_match_score(resume_keywords: Sequence[str], job_keywords: Sequence[str]) -> int:
    if not job_keywords:
        return 0
    technical = [k for k in job_keywords if is_technical(k)]
    matched = [t for t in technical if any(substring_related(t, rk) for rk in resume_keywords)]
    return percent(len(matched), len(technical))


def overall_score(keyword_score: int, fmt_score: int, skills_score: int) -> int:
    mean = (keyword_score + fmt_score + skills_score) / 3
    return max(0, min(100, math.floor(mean + 0.5)))


def composite_score(resume_text: str, resume_keywords: Sequence[str], job_keywords: Sequence[str],
                    found: Sequence[str]) -> Dict[str, int]:
    kw = keyword_match_score(found, job_keywords)
    fmt = format_score(resume_text)
    skills = skills_match_score(resume_keywords, job_keywords)
    return {
        "keyword_match": kw,
        "format": fmt,
        "skills_match": skills,
        "overall": overall_score(kw, fmt, skills),
    }
