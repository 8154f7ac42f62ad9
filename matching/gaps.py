from typing import List, Sequence

from schemas import SkillGap
from .keywords import substring_related
from .scorer import percent
from .skills import partition


def compute_gaps(resume_keywords: Sequence[str], job_keywords: Sequence[str]) -> List[SkillGap]:
    """Per-category coverage of the job keywords.

    Always three entries: Technical Skills, Soft Skills, Industry Keywords.
    An empty category reports 0%, not 100%.
    """
    gaps = []
    for category, keywords in partition(job_keywords).items():
        missing = [k for k in keywords if not any(substring_related(k, rk) for rk in resume_keywords)]
        matched = len(keywords) - len(missing)
        gaps.append(SkillGap(category=category, percentage=percent(matched, len(keywords)), missing=missing))
    return gaps
