"""Include/exclude rules evaluated against raw opening-tag text.

Rules never look at a parsed attribute map; they see the whole opening tag,
so a literal such as ``'active'`` also matches ``data-x="inactive"``.
"""

from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Tuple, Union

TagPredicate = Callable[[str], object]
RuleInput = Union[str, TagPredicate, "LiteralRule", "PredicateRule"]
RulesArgument = Optional[Union[RuleInput, Iterable[RuleInput]]]


@dataclass(frozen=True)
class LiteralRule:
    """Matches when ``text`` occurs anywhere in the opening tag."""

    text: str

    def matches(self, tag_text: str) -> bool:
        return self.text in tag_text


@dataclass(frozen=True)
class PredicateRule:
    """Matches when ``predicate(tag_text)`` is truthy.

    Exceptions raised by the predicate are not caught.
    """

    predicate: TagPredicate

    def matches(self, tag_text: str) -> bool:
        return bool(self.predicate(tag_text))


FilterRule = Union[LiteralRule, PredicateRule]


def coerce_rule(rule: RuleInput) -> FilterRule:
    """Convert a string or callable into a FilterRule."""
    if isinstance(rule, (LiteralRule, PredicateRule)):
        return rule
    if isinstance(rule, str):
        return LiteralRule(rule)
    if callable(rule):
        return PredicateRule(rule)
    raise TypeError(
        f"filter rule must be a string or a callable, not {type(rule).__name__}"
    )


def coerce_rules(rules: RulesArgument) -> Optional[Tuple[FilterRule, ...]]:
    """Normalise a rules argument.

    ``None`` stays ``None`` (no rule set given); a single string, callable or
    rule becomes a one-element tuple.
    """
    if rules is None:
        return None
    if isinstance(rules, (str, LiteralRule, PredicateRule)) or callable(rules):
        return (coerce_rule(rules),)
    return tuple(coerce_rule(rule) for rule in rules)


@dataclass(frozen=True)
class RuleSet:
    """Include rules (all must match) and exclude rules (none may match)."""

    includes: Optional[Tuple[FilterRule, ...]] = None
    excludes: Optional[Tuple[FilterRule, ...]] = None

    @classmethod
    def build(cls, includes: RulesArgument = None,
              excludes: RulesArgument = None) -> "RuleSet":
        return cls(coerce_rules(includes), coerce_rules(excludes))

    @property
    def is_empty(self) -> bool:
        """True when neither rule set was supplied.

        An empty list counts as supplied.
        """
        return self.includes is None and self.excludes is None

    def accepts(self, tag_text: str) -> bool:
        """Evaluate both rule sets against one opening tag."""
        if self.includes is not None:
            included = sum(1 for rule in self.includes if rule.matches(tag_text))
            if included != len(self.includes):
                return False
        if self.excludes is not None:
            excluded = sum(1 for rule in self.excludes if rule.matches(tag_text))
            if excluded > 0:
                return False
        return True
