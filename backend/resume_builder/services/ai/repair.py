"""
Deterministic post-processing of parsed AI output.

Pure functions only: each takes parsed data and returns a repaired copy.
"""

import copy
from datetime import timezone
from typing import Any, Dict, List, Optional

from dateutil import parser as date_parser

HEADLINE_KEYWORDS = [
    "Developer",
    "Engineer",
    "Analyst",
    "Designer",
    "Manager",
    "Student",
    "Collaborator",
    "Leader",
    "Team member",
]

FALLBACK_HEADLINE = "Professional"


def _job_title(job: Dict[str, Any]) -> str:
    if not isinstance(job, dict):
        return ""
    return job.get("title") or job.get("position") or ""


def _main_title(title: str) -> str:
    """'Admin Manager for Site X (part-time)' -> 'Admin Manager'."""
    return title.split(" for ")[0].split(" (")[0]


def headline_from_experience(experience: List[Dict[str, Any]]) -> Optional[str]:
    for job in experience:
        title = _job_title(job)
        if title and "intern" not in title.lower():
            return _main_title(title)

    # every role is an internship: fall back to the most recent one
    if experience:
        title = _job_title(experience[0])
        if title:
            return title
    return None


def headline_from_summary(summary: str) -> Optional[str]:
    words = summary.split(" ")
    for keyword in HEADLINE_KEYWORDS:
        if keyword not in summary:
            continue
        index = next((i for i, word in enumerate(words) if keyword in word), -1)
        if index > 0:
            return f"{words[index - 1]} {keyword}"
        return keyword
    return None


def headline_from_education(education: List[Dict[str, Any]]) -> Optional[str]:
    if education and isinstance(education[0], dict) and education[0].get("degree"):
        return f"{education[0]['degree']} Student"
    return None


def derive_headline(data: Dict[str, Any]) -> str:
    """
    Pick a professional headline from the rest of an extracted CV.

    Preference order: first non-intern job title, a title keyword in the
    summary with its preceding word, the first degree plus "Student", and
    finally "Professional".
    """
    experience = data.get("experience") or []
    summary = data.get("summary") or ""
    education = data.get("education") or []

    return (
        headline_from_experience(experience)
        or headline_from_summary(summary)
        or headline_from_education(education)
        or FALLBACK_HEADLINE
    )


def repair_professional_headline(data: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy of extracted CV data with ``personalInfo.professionalHeadline`` filled in."""
    repaired = copy.deepcopy(data)
    personal_info = repaired.get("personalInfo")
    if not isinstance(personal_info, dict):
        personal_info = {}
        repaired["personalInfo"] = personal_info

    if not personal_info.get("professionalHeadline"):
        personal_info["professionalHeadline"] = derive_headline(repaired)
    return repaired


def normalize_deadline(value: Any) -> Optional[str]:
    """
    Normalise a deadline to ``YYYY-MM-DDTHH:MM:SS.mmmZ`` in UTC.

    Returns None when the value is missing or cannot be parsed as a date.
    """
    if not value or not isinstance(value, str):
        return None
    try:
        parsed = date_parser.parse(value)
    except (ValueError, OverflowError):
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    parsed = parsed.astimezone(timezone.utc)
    return parsed.strftime("%Y-%m-%dT%H:%M:%S.") + f"{parsed.microsecond // 1000:03d}Z"


def repair_job_description(data: Dict[str, Any]) -> Dict[str, Any]:
    repaired = copy.deepcopy(data)
    repaired["applicationDeadline"] = normalize_deadline(repaired.get("applicationDeadline"))
    return repaired
