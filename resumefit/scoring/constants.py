from __future__ import annotations

import re

ALGORITHM_VERSION_V21 = "v2.1.0-2026.01"

# Defaults mirror config/scoring.yaml.
V1_WEIGHTS = {"keyword": 0.50, "section_coverage": 0.25, "content_quality": 0.25}
V1_DEGRADED_WEIGHTS = {"keyword": 0.67, "section_coverage": 0.33}
V1_REQUIRED_SECTIONS = ("summary", "skills", "experience")

COMPONENT_WEIGHTS_V21 = {
    "keywords": 0.40,
    "qualification_fit": 0.15,
    "content_quality": 0.20,
    "sections": 0.15,
    "format": 0.10,
}

WEIGHT_PROFILES_V21 = {
    "coop_entry": {
        "keywords": 0.42,
        "qualification_fit": 0.10,
        "content_quality": 0.18,
        "sections": 0.20,
        "format": 0.10,
    },
    "senior_executive": {
        "keywords": 0.35,
        "qualification_fit": 0.20,
        "content_quality": 0.25,
        "sections": 0.10,
        "format": 0.10,
    },
    "career_changer": {
        "keywords": 0.40,
        "qualification_fit": 0.14,
        "content_quality": 0.18,
        "sections": 0.18,
        "format": 0.10,
    },
}

ROLE_ADJUSTMENTS_V21 = {
    "designer": {"format": 0.05, "keywords": -0.05},
    "data_scientist": {"keywords": 0.03, "sections": -0.03},
    "software_engineer": {"keywords": 0.03, "sections": -0.03},
}

WEIGHT_SUM_TOLERANCE = 0.011
TIER_THRESHOLDS = {"excellent": 85, "strong": 70, "moderate": 55}
MAX_ACTION_ITEMS = 8

# ---------------------------------------------------------------------------
# Keywords
# ---------------------------------------------------------------------------

IMPORTANCE_WEIGHTS = {"high": 1.0, "medium": 0.6, "low": 0.3}
MATCH_TYPE_WEIGHTS = {"exact": 1.0, "fuzzy": 0.85, "semantic": 0.65}
PLACEMENT_WEIGHTS = {
    "skills_section": 1.0,
    "summary": 0.90,
    "experience_bullet": 0.85,
    "experience_paragraph": 0.70,
    "education": 0.80,
    "projects": 0.85,
    "other": 0.65,
}
MISSING_REQUIRED_PENALTY = 0.12
MIN_PENALTY_MULTIPLIER = 0.30
PREFERRED_BONUS_CAP = 0.25

# ---------------------------------------------------------------------------
# Content quality
# ---------------------------------------------------------------------------

CONTENT_QUALITY_WEIGHTS = {"quantification": 0.35, "action_verbs": 0.30, "keyword_density": 0.35}

STRONG_ACTION_VERBS = frozenset(
    {
        "led", "directed", "managed", "supervised", "headed", "oversaw",
        "coordinated", "orchestrated", "spearheaded", "championed",
        "achieved", "accomplished", "delivered", "exceeded", "surpassed",
        "attained", "earned", "won", "secured",
        "grew", "increased", "expanded", "scaled", "accelerated",
        "boosted", "elevated", "enhanced", "maximized", "optimized",
        "built", "created", "developed", "designed", "established",
        "founded", "launched", "initiated", "pioneered", "introduced",
        "improved", "streamlined", "transformed", "revamped", "modernized",
        "upgraded", "refined", "restructured", "reengineered",
        "solved", "resolved", "fixed", "addressed", "eliminated",
        "reduced", "minimized", "prevented", "mitigated",
        "drove", "generated", "produced", "saved", "cut",
        "recovered", "captured", "negotiated", "influenced",
        "implemented", "architected", "engineered", "automated",
        "integrated", "deployed", "migrated", "configured",
    }
)

# Acceptable for junior and co-op bullets.
MODERATE_ACTION_VERBS = frozenset(
    {
        "contributed", "collaborated", "partnered", "coordinated", "facilitated",
        "supported", "assisted", "participated", "engaged",
        "managed", "maintained", "handled", "processed", "performed",
        "conducted", "completed", "prepared", "organized", "documented",
        "wrote", "tested", "reviewed", "updated", "modified",
    }
)

WEAK_ACTION_VERBS = frozenset(
    {
        "helped", "assisted", "supported", "participated", "contributed",
        "worked", "was", "had", "did", "made",
        "handled", "dealt", "used", "involved", "responsible",
        "tried", "attempted", "learned", "studied", "observed",
        "watched", "saw", "knew", "understood", "familiarized",
    }
)

WEAK_VERB_PHRASES = (
    "was responsible for",
    "was involved in",
    "dealt with",
    "tasked with",
    "in charge of",
    "looked after",
)

# (pattern, tier, kind), highest value first.
QUANTIFICATION_PATTERNS = (
    (re.compile(r"\$[\d,]+(?:\.\d+)?[MBT]", re.I), "high", "currency"),
    (re.compile(r"\b9\d(?:\.\d+)?%", re.I), "high", "percentage"),
    (re.compile(r"\b\d{2,}x\b", re.I), "high", "multiplier"),
    (re.compile(r"\b\d{1,3}(?:,\d{3}){2,}\+?\b"), "high", "count"),
    (re.compile(r"team\s+of\s+\d{2,}", re.I), "high", "scale"),
    (re.compile(r"\b\d+\s*(?:countries|regions|markets)\b", re.I), "high", "scale"),
    (re.compile(r"\$[\d,]+(?:\.\d+)?K", re.I), "medium", "currency"),
    (re.compile(r"\b[5-8]\d%", re.I), "medium", "percentage"),
    (re.compile(r"\b[2-9]x\b", re.I), "medium", "multiplier"),
    (re.compile(r"\b\d{1,3}(?:,\d{3})\+?\s*(?:users?|customers?|requests?)", re.I), "medium", "count"),
    (re.compile(r"team\s+of\s+\d", re.I), "medium", "scale"),
    (re.compile(r"\$[\d,]+(?:\.\d+)?(?!\d)", re.I), "low", "currency"),
    (re.compile(r"\b[1-4]?\d%", re.I), "low", "percentage"),
    (re.compile(r"\b\d+\+?\s*(?:users?|customers?|clients?)", re.I), "low", "count"),
)

TIER_POINTS = {"high": 1.0, "medium": 0.7, "low": 0.4}

# ---------------------------------------------------------------------------
# Qualifications
# ---------------------------------------------------------------------------

DEGREE_LEVELS = {"high_school": 1, "associate": 2, "bachelor": 3, "master": 4, "phd": 5}

DEGREE_FIELD_MATCHES = {
    "computer_science": ("computer science", "cs", "computing", "computational"),
    "software_engineering": ("software engineering", "software development"),
    "information_technology": ("information technology", "it", "information systems", "mis"),
    "engineering": ("engineering", "electrical engineering", "computer engineering"),
    "related": ("mathematics", "math", "physics", "data science", "statistics"),
}

QUALIFICATION_WEIGHTS = {"degree": 0.4, "experience": 0.4, "certifications": 0.2}

# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------

SECTION_CONFIG_V21 = {
    "coop": {
        "summary": {"required": False, "min_length": 50, "max_points": 15},
        "skills": {"required": True, "min_items": 8, "max_points": 25},
        "experience": {"required": False, "min_bullets": 3, "max_points": 20},
        "education": {"required": True, "min_length": 30, "max_points": 25},
        "projects": {"required": True, "min_bullets": 2, "max_points": 20},
        "certifications": {"required": False, "min_items": 1, "max_points": 10},
    },
    "fulltime": {
        "summary": {"required": True, "min_length": 50, "max_points": 15},
        "skills": {"required": True, "min_items": 8, "max_points": 25},
        "experience": {"required": True, "min_bullets": 6, "max_points": 30},
        "education": {"required": True, "min_length": 30, "max_points": 15},
        "projects": {"required": False, "min_bullets": 2, "max_points": 10},
        "certifications": {"required": False, "min_items": 1, "max_points": 10},
    },
    "career_changer": {
        "summary": {"required": True, "min_length": 80, "max_points": 20},
        "skills": {"required": True, "min_items": 8, "max_points": 25},
        "experience": {"required": True, "min_bullets": 4, "max_points": 20},
        "education": {"required": True, "min_length": 30, "max_points": 20},
        "projects": {"required": True, "min_bullets": 2, "max_points": 15},
        "certifications": {"required": False, "min_items": 1, "max_points": 10},
    },
}

# ---------------------------------------------------------------------------
# Format
# ---------------------------------------------------------------------------

_MONTH = r"(?:Jan(?:uary)?|Feb(?:ruary)?|Mar(?:ch)?|Apr(?:il)?|May|Jun(?:e)?|Jul(?:y)?|Aug(?:ust)?|Sep(?:tember)?|Oct(?:ober)?|Nov(?:ember)?|Dec(?:ember)?)"

FORMAT_EMAIL_RE = re.compile(r"[\w.-]+@[\w.-]+\.\w{2,}")
FORMAT_PHONE_RE = re.compile(r"(\+?1[-.\s]?)?\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}")
LINKEDIN_RE = re.compile(r"linkedin\.com/in/", re.I)
GITHUB_RE = re.compile(r"github\.com/", re.I)

DATE_PATTERNS = (
    re.compile(rf"\b{_MONTH}\s+\d{{4}}\b", re.I),
    re.compile(r"\b\d{1,2}/\d{4}\b"),
    re.compile(r"\b\d{4}\s*[-–—]\s*(?:\d{4}|Present|Current|Now)\b", re.I),
)

SECTION_HEADER_PATTERNS = (
    re.compile(r"\b(?:experience|work\s*experience|employment|professional\s*experience)\b", re.I),
    re.compile(r"\b(?:education|academic)\b", re.I),
    re.compile(r"\b(?:skills|technical\s*skills|core\s*competencies)\b", re.I),
    re.compile(r"\b(?:summary|profile|professional\s*summary)\b", re.I),
)

BULLET_LINE_PATTERNS = (
    re.compile(r"^[•‣◦⁃∙]\s", re.M),
    re.compile(r"^[-*]\s", re.M),
    re.compile(r"^\d+\.\s", re.M),
)

OBJECTIVE_RE = re.compile(r"\b(?:objective|career\s+objective)\s*[:|\n]", re.I)
REFERENCES_RE = re.compile(r"\breferences\s+(?:available\s+)?(?:upon|on)\s+request\b", re.I)
COMPLEX_FORMATTING_RE = re.compile(r"\t{2,}|\|.*\|.*\|")

EXPERIENCE_RANGE_RE = re.compile(
    rf"(?:{_MONTH}\s+)?(\d{{4}})\s*[-–—]\s*(?:{_MONTH}\s+)?(\d{{4}}|Present|Current|Now)",
    re.I,
)
