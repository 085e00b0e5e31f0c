# SPDX-FileCopyrightText: 2026 Giovanni MARIANO
#
# SPDX-License-Identifier: MPL-2.0

"""
Rule minimization front end.

Algebra.simplify turns a rule into an equivalent sum of products or product
of sums, whichever has fewer literals, or reports that it is a tautology /
contradiction. It is a pure function of its input and holds no shared
state.

Example:
    result = Algebra().simplify("1 2 + 1 -2")
    result.display()   # '1'
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple, Union as TypingUnion, TYPE_CHECKING
import logging

from .acomp import Acomp
from .config import Config
from .headrule import HeadRule, parse_rule
from .rules import AlwaysFalse, AlwaysTrue, Rule

if TYPE_CHECKING:
    from .surfaces import SurfaceRegistry

logger = logging.getLogger(__name__)

RuleInput = TypingUnion[Rule, HeadRule, str]


class SimplifyStatus(Enum):
    MINIMIZED = "minimized"
    ALWAYS_TRUE = "always_true"
    ALWAYS_FALSE = "always_false"
    UNMINIMIZED = "unminimized"


@dataclass
class SimplifyResult:
    """Outcome of a simplification.

    Attributes:
        rule: Equivalent rule (AlwaysTrue / AlwaysFalse for constants).
        status: What happened.
        literals_before: Literal count of the input.
        literals_after: Literal count of rule.
    """
    rule: Rule
    status: SimplifyStatus
    literals_before: int
    literals_after: int

    @property
    def minimized(self) -> bool:
        """False when the literal ceiling stopped minimization."""
        return self.status is not SimplifyStatus.UNMINIMIZED

    @property
    def always_true(self) -> bool:
        return self.status is SimplifyStatus.ALWAYS_TRUE

    @property
    def always_false(self) -> bool:
        return self.status is SimplifyStatus.ALWAYS_FALSE

    def display(self) -> str:
        return self.rule.display()

    def as_headrule(self, registry: Optional['SurfaceRegistry'] = None) -> HeadRule:
        return HeadRule(self.rule, registry)


class Algebra:
    """Boolean simplifier for rules.

    Attributes:
        max_literals: Rules over more distinct surfaces are returned as-is.
        exhaustive_limit: See Acomp.make_epi.
    """

    def __init__(self, max_literals: Optional[int] = None,
                 exhaustive_limit: Optional[int] = None,
                 config: Optional[Config] = None):
        config = config if config is not None else Config()
        self.max_literals = (config.max_literals if max_literals is None
                             else max_literals)
        self.exhaustive_limit = (config.exhaustive_limit if exhaustive_limit is None
                                 else exhaustive_limit)

    @staticmethod
    def _to_rule(item: RuleInput) -> Optional[Rule]:
        if isinstance(item, HeadRule):
            return item.root
        if isinstance(item, Rule):
            return item
        if isinstance(item, str):
            return parse_rule(item)
        raise TypeError(f"Cannot simplify {type(item).__name__}")

    def simplify(self, item: RuleInput) -> SimplifyResult:
        """Minimal equivalent of item.

        The input is not modified. A tie between the minimal sum of
        products and product of sums goes to the sum of products. If the
        result still has more literals than the input, the input is kept.
        """
        rule = self._to_rule(item)
        if rule is None:
            return SimplifyResult(AlwaysTrue(), SimplifyStatus.ALWAYS_TRUE, 0, 0)

        before = rule.literal_count()
        n_surfaces = len({abs(sn) for sn in rule.surface_numbers()})
        if n_surfaces > self.max_literals:
            logger.info("Rule over %d surfaces exceeds ceiling %d; not minimized",
                        n_surfaces, self.max_literals)
            return SimplifyResult(rule.copy(), SimplifyStatus.UNMINIMIZED,
                                  before, before)

        acomp = Acomp.from_rule(rule)
        if acomp.is_always_false():
            marker = AlwaysFalse(acomp.alphabet[0] if acomp.alphabet else None)
            return SimplifyResult(marker, SimplifyStatus.ALWAYS_FALSE, before, 0)
        if acomp.is_always_true():
            return SimplifyResult(AlwaysTrue(), SimplifyStatus.ALWAYS_TRUE, before, 0)

        cover = acomp.make_epi(acomp.make_pi(), self.exhaustive_limit)
        reduced = acomp.to_rule(cover)

        falses = acomp.complement()
        pos_cover = falses.make_epi(falses.make_pi(), self.exhaustive_limit)
        pos = falses.to_pos_rule(pos_cover)
        if pos.literal_count() < reduced.literal_count():
            reduced = pos

        after = reduced.literal_count()
        if after > before:
            logger.debug("Minimal form (%d literals) longer than input (%d); kept input",
                         after, before)
            return SimplifyResult(rule.copy(), SimplifyStatus.MINIMIZED, before, before)
        return SimplifyResult(reduced, SimplifyStatus.MINIMIZED, before, after)

    def count_literals(self, item: RuleInput) -> int:
        rule = self._to_rule(item)
        return 0 if rule is None else rule.literal_count()

    def truth_table(self, item: RuleInput) -> Tuple[List[int], List[int]]:
        """(alphabet, true minterm indices) of item."""
        rule = self._to_rule(item)
        if rule is None:
            return [], [0]
        acomp = Acomp.from_rule(rule)
        return acomp.alphabet, acomp.minterms

    def logical_equal(self, a: RuleInput, b: RuleInput) -> bool:
        """True if a and b agree on every assignment of their joint surfaces."""
        rule_a = self._to_rule(a) or AlwaysTrue()
        rule_b = self._to_rule(b) or AlwaysTrue()
        alphabet = {}
        for sn in rule_a.surface_numbers() + rule_b.surface_numbers():
            alphabet.setdefault(abs(sn), len(alphabet))
        for index in range(1 << len(alphabet)):
            def lookup(literal: int, index=index) -> bool:
                return bool((index >> alphabet[abs(literal)]) & 1) == (literal > 0)

            if rule_a.evaluate(lookup) != rule_b.evaluate(lookup):
                return False
        return True
