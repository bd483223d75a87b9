from .section_ordering import RECOMMENDED_ORDER, SECTION_HEADINGS, detect_section_order, validate_section_order
from .structural_rules import (
    STRUCTURAL_RULES,
    UNSAFE_HEADERS,
    RuleContext,
    StructuralRule,
    detect_unsafe_headers,
    generate_structural_suggestions,
)

__all__ = [
    "RECOMMENDED_ORDER",
    "SECTION_HEADINGS",
    "detect_section_order",
    "validate_section_order",
    "STRUCTURAL_RULES",
    "UNSAFE_HEADERS",
    "RuleContext",
    "StructuralRule",
    "detect_unsafe_headers",
    "generate_structural_suggestions",
]
