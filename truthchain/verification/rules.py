"""Static rule tables for the local pattern and domain fallbacks."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Tuple

BASELINE_SCORE = 65
VERIFIED_THRESHOLD = 70


@dataclass(frozen=True)
class Rule:
    pattern: re.Pattern
    weight: int
    name: str

    def matches(self, text: str) -> bool:
        return self.pattern.search(text) is not None


def _rule(pattern: str, weight: int, name: str) -> Rule:
    return Rule(re.compile(pattern, re.IGNORECASE), weight, name)


CREDIBILITY_RULES: Tuple[Rule, ...] = (
    _rule(
        r"according to (a study|research|report) (published|conducted) (by|in) ([A-Z][a-z]+ ?){1,}",
        15,
        "Specific citation",
    ),
    _rule(r"published in ([A-Z][a-z]+ ?){1,}", 10, "Publication mention"),
    _rule(
        r"(study|research|survey) (of|with|involving) (\d[,\d]*) (participants|people|subjects)",
        10,
        "Research sample",
    ),
    _rule(r"\b(\d{1,2})[/-](\d{1,2})[/-](\d{2,4})\b", 5, "Contains dates"),
    _rule(r"university|institute|laboratory|academy", 5, "Academic institution"),
    _rule(r"\b(percent|percentage|\d+%)\b", 5, "Contains statistics"),
)

MISINFORMATION_RULES: Tuple[Rule, ...] = (
    _rule(r"\b(exclusive|breaking|shocking)\b", -5, "Sensationalist terms"),
    _rule(r"\b(doctors won't tell you|scientists can't explain)\b", -10, "Authority undermining"),
    _rule(r"\b(miracle|cure|secret)\b", -8, "Miracle claims"),
    _rule(r"\b(banned|censored|suppressed)\b", -7, "Suppression claims"),
    _rule(r"\b(100%|guaranteed|proven)\b", -5, "Absolute claims"),
)

TRUSTED_DOMAIN_SCORE = 95

TRUSTED_DOMAINS: Tuple[str, ...] = (
    "wikipedia.org",
    "github.com",
    "stackoverflow.com",
    "medium.com",
    "reuters.com",
    "apnews.com",
    "bbc.com",
    "nytimes.com",
    "washingtonpost.com",
    "wsj.com",
    "economist.com",
    "nature.com",
    "science.org",
    "nasa.gov",
    "nih.gov",
    "who.int",
    "un.org",
    "coursera.org",
    "edx.org",
    "khanacademy.org",
    "udemy.com",
    "microsoft.com",
    "apple.com",
    "google.com",
    "ibm.com",
    "adobe.com",
    "oracle.com",
    "cisco.com",
    "mit.edu",
    "harvard.edu",
    "stanford.edu",
    "berkeley.edu",
    "yale.edu",
    "princeton.edu",
    "caltech.edu",
    "ted.com",
    "britannica.com",
    "snopes.com",
    "factcheck.org",
    "politifact.com",
    "ieee.org",
    "acm.org",
    "springer.com",
    "jstor.org",
    "netflix.com",
)


@dataclass(frozen=True)
class DomainCategory:
    name: str
    patterns: Tuple[str, ...]
    score: int


# Evaluated in order; ties keep the earlier category.
DOMAIN_CATEGORIES: Tuple[DomainCategory, ...] = (
    DomainCategory("academic", (".edu", "university", "college", "academic", "school"), 95),
    DomainCategory("government", (".gov", ".mil", "government", "federal", "state."), 95),
    DomainCategory("educational", ("coursera", "edx", "udemy", "khan", "learn", "education"), 90),
    DomainCategory("news", ("news", "times", "post", "herald", "tribune", "journal"), 80),
)

TLD_SCORES: Dict[str, int] = {
    ".org": 75,
    ".com": 65,
    ".net": 60,
}
DEFAULT_TLD_SCORE = 50
