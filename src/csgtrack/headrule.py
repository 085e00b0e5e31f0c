# SPDX-FileCopyrightText: 2026 Giovanni MARIANO
#
# SPDX-License-Identifier: MPL-2.0

"""
HeadRule: owner of a rule tree, with parsing, evaluation and edits.

Expression grammar:

    expr    := term (("+" | ":") term)*     union
    term    := factor factor*                implicit intersection
    factor  := LITERAL | "(" expr ")" | "#" factor
    LITERAL := "-"? digit+                   nonzero surface number

Example:
    rule = HeadRule("1 -2 + #(3 4)", registry)
    rule.is_valid((1, 1, 1))
    rule.display()   # '1 -2 + #(3 4)'
"""

from __future__ import annotations
from typing import (
    TYPE_CHECKING, Callable, Dict, List, Optional, Tuple, Union as TypingUnion
)
import logging
import math
import re

from .errors import NoExitError, RuleParseError
from .rules import (
    AlwaysFalse, AlwaysTrue, Complement, Intersection, Literal, Rule, Union,
    _Group
)

if TYPE_CHECKING:
    from .algebra import Algebra, SimplifyResult
    from .surfaces import SurfaceRegistry

logger = logging.getLogger(__name__)

Point = Tuple[float, float, float]
RuleLike = TypingUnion['HeadRule', Rule, str, int, None]

_OPERATORS = "()+:#"
_LITERAL_RE = re.compile(r"-?\d+")


def _tokenize(expression: str) -> List[Tuple[str, object, int]]:
    """Split expression into (kind, value, position) tokens."""
    tokens = []
    i, n = 0, len(expression)
    while i < n:
        ch = expression[i]
        if ch.isspace():
            i += 1
            continue
        if ch in _OPERATORS:
            tokens.append((ch, ch, i))
            i += 1
            continue
        match = _LITERAL_RE.match(expression, i)
        if match:
            value = int(match.group())
            if value == 0:
                raise RuleParseError("Surface number cannot be zero",
                                     i, match.group(), expression)
            tokens.append(('LIT', value, i))
            i = match.end()
            continue
        j = i + 1
        while j < n and not expression[j].isspace() and expression[j] not in _OPERATORS:
            j += 1
        raise RuleParseError("Unknown token", i, expression[i:j], expression)
    return tokens


class _Parser:
    """Recursive-descent parser over the token list."""

    def __init__(self, expression: str):
        self.expression = expression
        self.tokens = _tokenize(expression)
        self.pos = 0

    def _peek(self) -> Optional[str]:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos][0]
        return None

    def _error(self, message: str) -> RuleParseError:
        if self.pos < len(self.tokens):
            kind, value, where = self.tokens[self.pos]
            return RuleParseError(message, where, str(value), self.expression)
        return RuleParseError(message, len(self.expression), "", self.expression)

    def parse(self) -> Optional[Rule]:
        if not self.tokens:
            return None
        rule = self._expr()
        if self.pos < len(self.tokens):
            if self._peek() == ')':
                raise self._error("Unbalanced parenthesis")
            raise self._error("Unexpected token")
        return rule

    def _expr(self) -> Rule:
        terms = [self._term()]
        while self._peek() in ('+', ':'):
            self.pos += 1
            terms.append(self._term())
        return terms[0] if len(terms) == 1 else Union(*terms)

    def _term(self) -> Rule:
        factors = [self._factor()]
        while self._peek() in ('LIT', '(', '#'):
            factors.append(self._factor())
        return factors[0] if len(factors) == 1 else Intersection(*factors)

    def _factor(self) -> Rule:
        kind = self._peek()
        if kind is None:
            raise self._error("Unexpected end of expression")
        if kind == 'LIT':
            value = self.tokens[self.pos][1]
            self.pos += 1
            return Literal(value)
        if kind == '(':
            opening = self.tokens[self.pos]
            self.pos += 1
            inner = self._expr()
            if self._peek() != ')':
                raise RuleParseError("Unbalanced parenthesis", opening[2], '(',
                                     self.expression)
            self.pos += 1
            return inner
        if kind == '#':
            self.pos += 1
            return self._factor().negate()
        raise self._error("Unexpected token")


def parse_rule(expression: str) -> Optional[Rule]:
    """Parse expression into a rule tree (None for a blank expression).

    Raises:
        RuleParseError: On malformed input.
    """
    return _Parser(expression).parse()


class HeadRule:
    """Rule tree root with geometry-aware evaluation.

    An empty HeadRule (no root) is always valid: it models an unbounded
    cell.

    Attributes:
        registry: SurfaceRegistry used for point evaluation and tracking.
    """

    def __init__(self, rule: RuleLike = None,
                 registry: Optional['SurfaceRegistry'] = None):
        """
        Args:
            rule: Expression string, Rule, HeadRule or signed surface int.
            registry: Surface registry for point queries.
        """
        self.registry = registry
        self._root: Optional[Rule] = None
        if isinstance(rule, HeadRule) and registry is None:
            self.registry = rule.registry
        self._root = self._as_rule(rule)

    # =========================================================================
    # Construction
    # =========================================================================

    @staticmethod
    def _as_rule(item: RuleLike) -> Optional[Rule]:
        """Private copy of item as a Rule (None when empty)."""
        if item is None:
            return None
        if isinstance(item, HeadRule):
            return item._root.copy() if item._root is not None else None
        if isinstance(item, AlwaysTrue):
            return None
        if isinstance(item, AlwaysFalse) and item.surface is None:
            raise ValueError("AlwaysFalse needs a surface to be held by a HeadRule")
        if isinstance(item, Rule):
            return item.copy()
        if isinstance(item, bool):
            raise TypeError("Cannot build a rule from a bool")
        if isinstance(item, int):
            return Literal(item)
        if isinstance(item, str):
            return parse_rule(item)
        raise TypeError(f"Cannot build a rule from {type(item).__name__}")

    def parse(self, expression: str) -> 'HeadRule':
        """Replace the rule with the parsed expression.

        Raises:
            RuleParseError: On malformed input (the rule is unchanged).
        """
        self._root = parse_rule(expression)
        return self

    @property
    def root(self) -> Optional[Rule]:
        """Root node (None for an empty rule)."""
        return self._root

    def copy(self) -> 'HeadRule':
        return HeadRule(self, self.registry)

    def is_empty(self) -> bool:
        return self._root is None

    def is_union(self) -> bool:
        """True if the top level is a union of two or more parts."""
        return isinstance(self._root, Union) and len(self._root.children) > 1

    def is_complementary(self) -> bool:
        """True if the rule contains a complement node."""
        return self._root is not None and _contains_complement(self._root)

    # =========================================================================
    # Evaluation
    # =========================================================================

    def _require_registry(self) -> 'SurfaceRegistry':
        if self.registry is None:
            raise RuntimeError("HeadRule has no surface registry")
        return self.registry

    def _point_lookup(self, point: Point,
                      forced: int = 0) -> Callable[[int], bool]:
        """Literal lookup at point; surface |forced| takes the sense of forced."""
        registry = self._require_registry()
        sides: Dict[int, int] = {}
        if forced:
            sides[abs(forced)] = 1 if forced > 0 else -1

        def lookup(literal: int) -> bool:
            key = abs(literal)
            side = sides.get(key)
            if side is None:
                side = sides[key] = registry.side_of(key, point)
            return side == 0 or (side > 0) == (literal > 0)

        return lookup

    def is_valid(self, point: Point) -> bool:
        """True if point satisfies the rule (on-surface counts as both sides)."""
        if self._root is None:
            return True
        return self._root.evaluate(self._point_lookup(point))

    def is_valid_map(self, states: Dict[int, int]) -> bool:
        """Evaluate with surface states {surface: +1/-1}.

        Raises:
            KeyError: If a referenced surface has no state.
        """
        if self._root is None:
            return True
        return self._root.evaluate(
            lambda literal: (states[abs(literal)] > 0) == (literal > 0))

    def is_direction_valid(self, point: Point, surface: int) -> bool:
        """Evaluate at point with |surface| forced to the sense of surface."""
        if self._root is None:
            return True
        return self._root.evaluate(self._point_lookup(point, forced=surface))

    def pair_valid(self, surface: int, point: Point) -> Tuple[bool, bool]:
        """(valid with +surface forced, valid with -surface forced)."""
        key = abs(surface)
        return (self.is_direction_valid(point, key),
                self.is_direction_valid(point, -key))

    # =========================================================================
    # Surface queries
    # =========================================================================

    def get_surface_numbers(self) -> List[int]:
        """Signed literals, deduplicated, in first-appearance order."""
        if self._root is None:
            return []
        return self._root.surface_numbers()

    def get_surface_set(self) -> List[int]:
        """Unsigned surface ids, deduplicated, in first-appearance order."""
        seen = {}
        for sn in self.get_surface_numbers():
            seen.setdefault(abs(sn), None)
        return list(seen)

    def get_top_surfaces(self) -> List[int]:
        """Literals that sit directly under a top-level intersection."""
        if isinstance(self._root, Literal):
            return [self._root.surface]
        if isinstance(self._root, Intersection):
            return [c.surface for c in self._root.children if isinstance(c, Literal)]
        return []

    def literal_count(self) -> int:
        return 0 if self._root is None else self._root.literal_count()

    # =========================================================================
    # Edits
    # =========================================================================

    def add_intersection(self, other: RuleLike) -> 'HeadRule':
        """Root becomes (root AND other). No-op for an empty other."""
        return self._graft(Intersection, other)

    def add_union(self, other: RuleLike) -> 'HeadRule':
        """Root becomes (root OR other). No-op for an empty other."""
        return self._graft(Union, other)

    def _graft(self, kind, other: RuleLike) -> 'HeadRule':
        rule = self._as_rule(other)
        if rule is None:
            return self
        if self._root is None:
            self._root = rule
        else:
            self._root = kind(self._root, rule)
        return self

    def make_complement(self) -> 'HeadRule':
        """Complement in place. Double complements collapse.

        An empty rule stays empty.
        """
        if self._root is not None:
            self._root = self._as_rule(self._root.negate())
        return self

    def complement(self) -> 'HeadRule':
        """New HeadRule holding the complement of this one."""
        return self.copy().make_complement()

    def substitute_surface(self, old_id: int, new_id: int) -> int:
        """Replace surface |old_id| by new_id in every literal.

        The literal sign is kept; a negative new_id reverses the sense.

        Returns:
            Number of literals rewritten (0 if none).
        """
        if new_id == 0:
            raise ValueError("Surface number cannot be zero")
        if old_id == new_id or self._root is None:
            return 0
        key = abs(old_id)
        count = 0
        for lit in self._root.literals():
            if abs(lit.surface) == key:
                lit.surface = new_id if lit.surface > 0 else -new_id
                count += 1
        return count

    def remove_items(self, surface_id: int) -> int:
        """Remove every literal on surface |surface_id| (either sense).

        Groups and complements left empty are removed as well.

        Returns:
            Number of literals removed.
        """
        if self._root is None:
            return 0
        self._root, count = _remove_surface(self._root, abs(surface_id))
        return count

    # =========================================================================
    # Tracking
    # =========================================================================

    def track_surf(self, point: Point, direction: Point,
                   max_distance: float = math.inf) -> Tuple[float, int]:
        """Distance to the nearest surface crossing that changes the rule.

        Intersections that do not change the rule's truth value (internal
        or redundant surfaces) are skipped.

        Args:
            point: Ray origin.
            direction: Unit direction.
            max_distance: Crossings beyond this are ignored.

        Returns:
            (distance, surface) where surface is signed with the sense of
            the far side of the crossing.

        Raises:
            NoExitError: If no boundary is crossed within max_distance.
        """
        registry = self._require_registry()
        min_step = registry.config.min_track_step
        best_d = math.inf
        best_surface = 0
        for sn in self.get_surface_set():
            surf = registry.get(sn)
            roots = surf.intersect_line(point, direction)
            # Double root or a chord shorter than a step: the ray grazes
            if len(roots) == 2 and roots[1] - roots[0] <= min_step:
                continue
            for d in roots:
                if d <= min_step or d >= best_d or d > max_distance:
                    continue
                hit = (point[0] + d * direction[0],
                       point[1] + d * direction[1],
                       point[2] + d * direction[2])
                sense = surf.side_direction(hit, direction)
                if sense == 0:
                    continue
                plus, minus = self.pair_valid(sn, hit)
                if plus == minus or self.is_direction_valid(hit, sense * sn):
                    continue
                best_d = d
                best_surface = sense * sn
        if best_surface == 0:
            raise NoExitError(
                f"No exit from rule '{self.display()}' from {point} "
                f"within {max_distance}")
        return best_d, best_surface

    # =========================================================================
    # Output
    # =========================================================================

    def display(self) -> str:
        """Expression text; parses back to an equivalent rule."""
        return "" if self._root is None else self._root.display()

    def simplify(self, algebra: Optional['Algebra'] = None) -> 'SimplifyResult':
        """Minimize the rule (see Algebra.simplify)."""
        from .algebra import Algebra
        if algebra is None:
            config = self.registry.config if self.registry is not None else None
            algebra = Algebra(config=config)
        return algebra.simplify(self)

    def __str__(self) -> str:
        return self.display()

    def __repr__(self) -> str:
        return f"HeadRule({self.display()!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HeadRule):
            return NotImplemented
        return self.display() == other.display()

    __hash__ = None


def _contains_complement(node: Rule) -> bool:
    if isinstance(node, Complement):
        return True
    if isinstance(node, _Group):
        return any(_contains_complement(c) for c in node.children)
    return False


def _remove_surface(node: Rule, key: int) -> Tuple[Optional[Rule], int]:
    """Subtree without literals on surface key, and the number removed."""
    if isinstance(node, Literal):
        return (None, 1) if abs(node.surface) == key else (node, 0)
    if isinstance(node, Complement):
        child, count = _remove_surface(node.child, key)
        if child is None:
            return None, count
        node.child = child
        return node, count
    if isinstance(node, _Group):
        kept = []
        total = 0
        for child in node.children:
            new_child, count = _remove_surface(child, key)
            total += count
            if new_child is not None:
                kept.append(new_child)
        if not kept:
            return None, total
        if len(kept) == 1:
            return kept[0], total
        return type(node)(*kept), total
    return node, 0
