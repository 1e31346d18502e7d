"""Scanning layer: pivot location, filter rules, attributes and the tag scanner."""

from .attributes import get_attribute, opening_tag, parse_attributes
from .filters import LiteralRule, PredicateRule, RuleSet, coerce_rule, coerce_rules
from .pivot import Locator, locate_pivot
from .scanner import BalancedTagScanner, compile_tag_patterns, find_balanced_end

__all__ = [
    "BalancedTagScanner",
    "compile_tag_patterns",
    "find_balanced_end",
    "LiteralRule",
    "PredicateRule",
    "RuleSet",
    "coerce_rule",
    "coerce_rules",
    "Locator",
    "locate_pivot",
    "get_attribute",
    "opening_tag",
    "parse_attributes",
]
