# SPDX-FileCopyrightText: 2026 Giovanni MARIANO
#
# SPDX-License-Identifier: MPL-2.0

"""
Rule tree nodes over signed surface literals.

A rule is a boolean expression whose leaves are literals: +n is the
positive halfspace of surface n, -n the negative one. Nodes:
    - Literal(n)
    - Intersection(a, b, ...)   (AND, written as juxtaposition: "a b")
    - Union(a, b, ...)          (OR, written with '+': "a + b")
    - Complement(a)             (NOT, written "#(a)")
    - AlwaysTrue / AlwaysFalse  (constants produced by the simplifier)

Nodes do not know about geometry. They are evaluated through a lookup
callable that maps a signed literal to its truth value, so the same tree
serves point containment (HeadRule) and truth tables (Acomp).
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Callable, Iterator, List, Optional

LiteralLookup = Callable[[int], bool]


class Rule(ABC):
    """Abstract base class for rule nodes."""

    @abstractmethod
    def evaluate(self, lookup: LiteralLookup) -> bool:
        """Truth value of the rule given a literal -> bool lookup."""
        pass

    @abstractmethod
    def evaluate_negated(self, lookup: LiteralLookup) -> bool:
        """Truth value of the complement, negation pushed down to the literals.

        A lookup may report both senses of a surface as true (a point on the
        surface), so the complement of +n must be evaluated as -n rather
        than as NOT +n.
        """
        pass

    @abstractmethod
    def literals(self) -> Iterator['Literal']:
        """Depth-first iterator over the literal leaves."""
        pass

    @abstractmethod
    def copy(self) -> 'Rule':
        """Deep copy of the subtree."""
        pass

    @abstractmethod
    def display(self) -> str:
        """Expression text (parseable by HeadRule.parse)."""
        pass

    def negate(self) -> 'Rule':
        """Complement of this rule with double negation removed."""
        return Complement(self.copy())

    def surface_numbers(self) -> List[int]:
        """Signed literal values, deduplicated, in first-appearance order."""
        seen = {}
        for lit in self.literals():
            seen.setdefault(lit.surface, None)
        return list(seen)

    def literal_count(self) -> int:
        """Number of literal leaves (with repeats)."""
        return sum(1 for _ in self.literals())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Rule):
            return NotImplemented
        return self.display() == other.display()

    def __hash__(self) -> int:
        return hash(self.display())

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.display()!r})"


class Literal(Rule):
    """Halfspace literal: true when the point is on the literal's side."""

    def __init__(self, surface: int):
        if surface == 0:
            raise ValueError("Literal surface number cannot be zero")
        self.surface = surface

    @property
    def surface_id(self) -> int:
        """Unsigned surface id."""
        return abs(self.surface)

    @property
    def positive(self) -> bool:
        return self.surface > 0

    def evaluate(self, lookup: LiteralLookup) -> bool:
        return lookup(self.surface)

    def evaluate_negated(self, lookup: LiteralLookup) -> bool:
        return lookup(-self.surface)

    def literals(self) -> Iterator['Literal']:
        yield self

    def copy(self) -> 'Literal':
        return Literal(self.surface)

    def negate(self) -> 'Literal':
        """Complement of a literal is the opposite halfspace."""
        return Literal(-self.surface)

    def display(self) -> str:
        return str(self.surface)


class _Group(Rule):
    """Shared behaviour of Intersection and Union."""

    def __init__(self, *children: Rule):
        # Flatten nested groups of the same kind
        self.children: List[Rule] = []
        for child in children:
            if type(child) is type(self):
                self.children.extend(child.children)
            else:
                self.children.append(child)
        if not self.children:
            raise ValueError(f"{self.__class__.__name__} requires at least 1 child")

    def literals(self) -> Iterator[Literal]:
        for child in self.children:
            yield from child.literals()

    def copy(self) -> '_Group':
        return type(self)(*(child.copy() for child in self.children))


class Intersection(_Group):
    """AND of its children. A single child passes through."""

    def evaluate(self, lookup: LiteralLookup) -> bool:
        return all(child.evaluate(lookup) for child in self.children)

    def evaluate_negated(self, lookup: LiteralLookup) -> bool:
        return any(child.evaluate_negated(lookup) for child in self.children)

    def display(self) -> str:
        parts = []
        for child in self.children:
            text = child.display()
            if isinstance(child, Union) and len(child.children) > 1:
                text = f"({text})"
            parts.append(text)
        return " ".join(parts)


class Union(_Group):
    """OR of its children. A single child passes through."""

    def evaluate(self, lookup: LiteralLookup) -> bool:
        return any(child.evaluate(lookup) for child in self.children)

    def evaluate_negated(self, lookup: LiteralLookup) -> bool:
        return all(child.evaluate_negated(lookup) for child in self.children)

    def display(self) -> str:
        return " + ".join(child.display() for child in self.children)


class Complement(Rule):
    """NOT of its single child."""

    def __init__(self, child: Rule):
        self.child = child

    def evaluate(self, lookup: LiteralLookup) -> bool:
        return self.child.evaluate_negated(lookup)

    def evaluate_negated(self, lookup: LiteralLookup) -> bool:
        return self.child.evaluate(lookup)

    def literals(self) -> Iterator[Literal]:
        return self.child.literals()

    def copy(self) -> 'Complement':
        return Complement(self.child.copy())

    def negate(self) -> Rule:
        """Double negation: ~(~A) = A"""
        return self.child.copy()

    def display(self) -> str:
        return f"#({self.child.display()})"


class AlwaysTrue(Rule):
    """Tautology marker. Displays as the empty expression."""

    def evaluate(self, lookup: LiteralLookup) -> bool:
        return True

    def evaluate_negated(self, lookup: LiteralLookup) -> bool:
        return False

    def literals(self) -> Iterator[Literal]:
        return iter(())

    def copy(self) -> 'AlwaysTrue':
        return AlwaysTrue()

    def negate(self) -> 'AlwaysFalse':
        return AlwaysFalse()

    def display(self) -> str:
        return ""


class AlwaysFalse(Rule):
    """Contradiction marker.

    Displays as "s -s" on a representative surface so that the text still
    parses to an empty region; with no surface it cannot be written out.
    """

    def __init__(self, surface: Optional[int] = None):
        self.surface = abs(surface) if surface else None

    def evaluate(self, lookup: LiteralLookup) -> bool:
        return False

    def evaluate_negated(self, lookup: LiteralLookup) -> bool:
        return True

    def literals(self) -> Iterator[Literal]:
        return iter(())

    def copy(self) -> 'AlwaysFalse':
        return AlwaysFalse(self.surface)

    def negate(self) -> AlwaysTrue:
        return AlwaysTrue()

    def display(self) -> str:
        if self.surface is None:
            raise ValueError("AlwaysFalse without a surface has no expression form")
        return f"{self.surface} -{self.surface}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Rule):
            return NotImplemented
        return isinstance(other, AlwaysFalse)

    def __hash__(self) -> int:
        return hash(AlwaysFalse)

    def __repr__(self) -> str:
        return f"AlwaysFalse({self.surface})"
