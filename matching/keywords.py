from typing import List, Sequence, Tuple


def substring_related(a: str, b: str) -> bool:
    """Case-insensitive containment in either direction.

    This is the single matching rule shared by the classifier, the skills
    score and the gap analysis. It over-matches short tokens ("r" is related
    to "react"); swap it here for token equality or fuzzy matching.
    """
    a, b = a.lower(), b.lower()
    return a in b or b in a


def match_keywords(resume_keywords: Sequence[str], job_keywords: Sequence[str]) -> Tuple[List[str], List[str]]:
    """Return (found, missing).

    found: resume keywords contained in some job keyword.
    missing: job keywords not contained in any resume keyword.
    The two sides are filtered independently, so they are not complements.
    """
    job_lower = [k.lower() for k in job_keywords]
    resume_lower = [k.lower() for k in resume_keywords]

    found = [kw for kw in resume_keywords if any(kw.lower() in jk for jk in job_lower)]
    missing = [kw for kw in job_keywords if not any(kw.lower() in rk for rk in resume_lower)]
    return found, missing
