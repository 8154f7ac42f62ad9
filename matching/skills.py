from typing import Dict, List, Sequence

from .keywords import substring_related

TECHNICAL_SKILLS = [
    'javascript', 'python', 'java', 'react', 'node', 'sql', 'aws', 'docker',
    'kubernetes', 'typescript', 'angular', 'vue', 'mongodb', 'postgresql',
    'redis', 'graphql', 'rest', 'api', 'microservices', 'devops', 'ci/cd',
    'git', 'linux', 'agile', 'scrum', 'testing', 'jest', 'cypress',
]

SOFT_SKILLS = [
    'leadership', 'communication', 'teamwork', 'problem-solving', 'analytical',
    'creative', 'adaptable', 'organized', 'detail-oriented', 'collaborative',
    'management', 'project management', 'time management',
]

TECHNICAL = "Technical Skills"
SOFT = "Soft Skills"
INDUSTRY = "Industry Keywords"
CATEGORIES = (TECHNICAL, SOFT, INDUSTRY)


def _in_lexicon(keyword: str, lexicon: List[str]) -> bool:
    return any(substring_related(keyword, term) for term in lexicon)


def is_technical(keyword: str) -> bool:
    return _in_lexicon(keyword, TECHNICAL_SKILLS)


def is_soft(keyword: str) -> bool:
    return _in_lexicon(keyword, SOFT_SKILLS)


def classify(keyword: str) -> str:
    # technical wins over soft; everything else is industry vocabulary
    if is_technical(keyword):
        return TECHNICAL
    if is_soft(keyword):
        return SOFT
    return INDUSTRY


def partition(keywords: Sequence[str]) -> Dict[str, List[str]]:
    """Split keywords into the three categories, preserving input order."""
    buckets: Dict[str, List[str]] = {c: [] for c in CATEGORIES}
    for kw in keywords:
        buckets[classify(kw)].append(kw)
    return buckets
