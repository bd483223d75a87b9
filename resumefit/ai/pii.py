from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

_EMAIL = r"(?P<email>\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b)"

_PROFILE = (
    r"(?P<profile>(?<![\w.@/])(?i:(?:https?://)?(?:www\.)?"
    r"(?:linkedin\.com|github\.com|twitter\.com|x\.com|gitlab\.com|bitbucket\.org))"
    r"/[\w\-./]+)"
)

# Street number needs 3+ digits and is not a year; the street name is Title Case
# on one line, so "500 users in one place" or "the 2023 Holiday Toy Drive" stay untouched.
_ADDRESS = (
    r"(?P<address>\b(?!(?:19|20)\d{2}\b)\d{3,}[ \t]+(?:[A-Z][A-Za-z0-9.'-]*[ \t]+){1,4}"
    r"(?:Street|St|Avenue|Ave|Road|Rd|Boulevard|Blvd|Lane|Ln|Drive|Dr|Court|Ct|Way|Place|Pl|Parkway|Pkwy)\b\.?"
    r"(?:,?[ \t]*(?:Apt|Apartment|Suite|Ste|Unit|\#)\.?[ \t]*[A-Za-z0-9-]+)?"
    r"(?:,[ \t]*[A-Z][A-Za-z .'-]*,[ \t]*[A-Z]{2}[ \t]+\d{5}(?:-\d{4})?)?)"
)

_PHONE = (
    r"(?P<phone>(?<![\w+])(?:(?:\+?1[-. \t]?)?(?:\(\d{3}\)|\d{3})[-. \t]?)?\d{3}[-. \t]?\d{4}(?!\w))"
)

_PII_RE = re.compile("|".join((_EMAIL, _PROFILE, _ADDRESS, _PHONE)))
_TOKEN_RE = re.compile(r"\[(?:EMAIL|PHONE|PROFILE|ADDRESS)_\d+\]")

_TOKEN_PREFIX = {
    "email": "EMAIL",
    "phone": "PHONE",
    "profile": "PROFILE",
    "address": "ADDRESS",
}


def _looks_like_phone(value: str) -> bool:
    # A bare digit run (IDs, years, order numbers) is never a phone number.
    stripped = value.strip()
    if stripped.startswith("+"):
        return True
    return any(ch in stripped for ch in "-. \t(")


@dataclass(frozen=True)
class RedactionStats:
    emails: int = 0
    phones: int = 0
    profiles: int = 0
    addresses: int = 0

    @property
    def total(self) -> int:
        return self.emails + self.phones + self.profiles + self.addresses


@dataclass(frozen=True)
class RedactionResult:
    """Redacted text plus the request-scoped token map needed to undo it."""

    redacted_text: str
    mapping: dict[str, str] = field(default_factory=dict)
    stats: RedactionStats = field(default_factory=RedactionStats)

    def restore(self, text: str) -> str:
        return restore_pii(text, self.mapping)


def redact_pii(text: str) -> RedactionResult:
    if not text:
        return RedactionResult(redacted_text=text or "")

    mapping: dict[str, str] = {}
    by_value: dict[tuple[str, str], str] = {}
    counters = {kind: 0 for kind in _TOKEN_PREFIX}
    # Tokens that already occur literally in the input are never reused.
    taken = set(_TOKEN_RE.findall(text))

    def next_token(kind: str) -> str:
        while True:
            counters[kind] += 1
            token = f"[{_TOKEN_PREFIX[kind]}_{counters[kind]}]"
            if token not in taken:
                return token

    def replace(match: re.Match[str]) -> str:
        kind = match.lastgroup or ""
        value = match.group(0)
        if kind == "phone" and not _looks_like_phone(value):
            return value
        key = (kind, value)
        token = by_value.get(key)
        if token is None:
            token = next_token(kind)
            by_value[key] = token
            mapping[token] = value
        return token

    redacted = _PII_RE.sub(replace, text)
    kinds = [kind for kind, _ in by_value]
    stats = RedactionStats(
        emails=kinds.count("email"),
        phones=kinds.count("phone"),
        profiles=kinds.count("profile"),
        addresses=kinds.count("address"),
    )
    if stats.total:
        logger.debug("pii_redacted emails=%s phones=%s profiles=%s addresses=%s",
                     stats.emails, stats.phones, stats.profiles, stats.addresses)
    return RedactionResult(redacted_text=redacted, mapping=mapping, stats=stats)


def restore_pii(text: str, mapping: dict[str, str]) -> str:
    if not text or not mapping:
        return text
    return _TOKEN_RE.sub(lambda match: mapping.get(match.group(0), match.group(0)), text)


def contains_pii(text: str) -> bool:
    if not text:
        return False
    for match in _PII_RE.finditer(text):
        if match.lastgroup != "phone" or _looks_like_phone(match.group(0)):
            return True
    return False
