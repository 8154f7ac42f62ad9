import pytest

from matching.scorer import (
    composite_score, format_score, keyword_match_score, overall_score, percent, skills_match_score,
)


def pad(text, length):
    return text + "x" * (length - len(text))


def test_percent_rounds_half_up_and_guards_zero():
    assert percent(1, 8) == 13
    assert percent(5, 8) == 63
    assert percent(2, 3) == 67
    assert percent(0, 0) == 0
    assert percent(3, 0) == 100


def test_keyword_match_score_example():
    assert keyword_match_score(["python", "react"], ["Python", "Docker", "React"]) == 67
    assert keyword_match_score([], []) == 0


def test_format_score_short_text_with_bullet_and_two_headers():
    text = pad("• experience\nskills\n", 200)
    assert len(text) == 200
    assert format_score(text) == 75


@pytest.mark.parametrize("text, expected", [
    (pad("Experience Education Skills Summary ", 1000), 100),
    (pad("Experience Education ", 6000), 90),
    (pad("hello ", 100), 65),
    (pad("● hello ", 100), 60),
    (pad("● Experience ", 6000), 70),
])
def test_format_score_deductions_are_additive(text, expected):
    assert format_score(text) == expected


def test_format_score_headers_are_case_insensitive():
    assert format_score(pad("EXPERIENCE / SKILLS", 600)) == 100


def test_skills_match_score_counts_technical_job_keywords():
    resume = ["python", "react"]
    job = ["Python", "Docker", "React", "leadership"]
    assert skills_match_score(resume, job) == 67


def test_skills_match_score_never_exceeds_100():
    # two resume keywords relate to the same job keyword
    assert skills_match_score(["python", "py"], ["Python"]) == 100


def test_skills_match_score_empty_job_list():
    assert skills_match_score(["python"], []) == 0


def test_skills_match_score_without_technical_job_keywords():
    assert skills_match_score(["leadership"], ["leadership", "fintech"]) == 0


def test_overall_score_is_rounded_mean():
    assert overall_score(67, 75, 67) == 70
    assert overall_score(0, 100, 0) == 33
    assert overall_score(0, 100, 1) == 34


def test_composite_score_is_deterministic():
    args = (pad("Experience Skills", 800), ["python"], ["Python", "Go"], ["python"])
    first = composite_score(*args)
    assert first == composite_score(*args)
    # "Go" is classified technical because it sits inside "mongodb"
    assert first == {"keyword_match": 50, "format": 100, "skills_match": 50, "overall": 67}
    assert all(0 <= v <= 100 for v in first.values())
