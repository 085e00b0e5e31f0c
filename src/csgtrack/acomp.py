# SPDX-FileCopyrightText: 2026 Giovanni MARIANO
#
# SPDX-License-Identifier: MPL-2.0

"""
Truth-table component of a rule and its Quine-McCluskey reduction.

The literal alphabet is the rule's distinct surface ids in ascending order,
so equivalent rules reduce to the same cover. Minterm index m assigns
surface alphabet[i] its positive side when bit i of m is set. The table is
computed by evaluating the rule on every assignment, so the reduced cover
is equivalent by construction.

A cover of the true minterms reads as a sum of products (to_rule); a cover
of the false minterms, negated, reads as a product of sums (to_pos_rule).
"""

from __future__ import annotations
from itertools import combinations
from typing import Dict, Iterable, List, Sequence
import logging

from .bnid import BnId, TRUE
from .rules import Intersection, Literal, Rule, Union

logger = logging.getLogger(__name__)


class Acomp:
    """Minterm set of a rule over its literal alphabet.

    Attributes:
        alphabet: Unsigned surface ids; index i is literal i.
        minterms: Sorted indices of the assignments where the rule is true.
    """

    def __init__(self, alphabet: Sequence[int], minterms: Iterable[int]):
        self.alphabet: List[int] = list(alphabet)
        self.minterms: List[int] = sorted(set(minterms))

    @classmethod
    def from_rule(cls, rule: Rule) -> 'Acomp':
        """Build the truth table of rule (2**n evaluations for n surfaces)."""
        surfaces = sorted({abs(sn) for sn in rule.surface_numbers()})
        alphabet: Dict[int, int] = {sid: i for i, sid in enumerate(surfaces)}

        minterms = []
        for index in range(1 << len(alphabet)):
            def lookup(literal: int, index=index) -> bool:
                bit = (index >> alphabet[abs(literal)]) & 1
                return bool(bit) == (literal > 0)

            if rule.evaluate(lookup):
                minterms.append(index)
        return cls(list(alphabet), minterms)

    @property
    def size(self) -> int:
        return len(self.alphabet)

    def is_always_true(self) -> bool:
        return len(self.minterms) == (1 << self.size)

    def is_always_false(self) -> bool:
        return not self.minterms

    def complement(self) -> 'Acomp':
        """Acomp over the same alphabet holding the false minterms."""
        true_set = set(self.minterms)
        return Acomp(self.alphabet,
                     (m for m in range(1 << self.size) if m not in true_set))

    def make_pi(self) -> List[BnId]:
        """Prime implicants of the minterm set.

        Implicants whose true counts differ by one are paired; each
        successful pair yields a BnId with one more don't-care. Anything
        never consumed in a round is prime.
        """
        work = [BnId.from_minterm(m, self.size) for m in self.minterms]
        primes: List[BnId] = []
        rounds = 0
        while work:
            rounds += 1
            unique: Dict[tuple, BnId] = {}
            for item in work:
                prev = unique.get(item.bits)
                unique[item.bits] = (BnId(item.bits, prev.covers | item.covers)
                                     if prev is not None else item)
            work = sorted(unique.values(), key=lambda b: (b.true_count(), b.bits))
            for item in work:
                item.pi = True

            merged = []
            for i, low in enumerate(work):
                group = low.true_count() + 1
                for high in work[i + 1:]:
                    count = high.true_count()
                    if count > group:
                        break
                    if count < group:
                        continue
                    combined = low.make_combination(high)
                    if combined is not None:
                        merged.append(combined)
                        low.pi = False
                        high.pi = False
            primes.extend(item for item in work if item.pi)
            work = merged
        logger.debug("Found %d prime implicants in %d rounds", len(primes), rounds)
        return primes

    def make_epi(self, primes: List[BnId], exhaustive_limit: int = 12) -> List[BnId]:
        """Select a small cover of the minterms from the prime implicants.

        Essential prime implicants are taken first. The remaining minterms
        are covered exhaustively (fewest implicants, then fewest literals)
        when at most exhaustive_limit implicants are left, otherwise
        greedily by coverage. Ties go to the implicant with the most
        don't-cares, then the lowest literal index.
        """
        chart: Dict[int, List[BnId]] = {}
        for m in self.minterms:
            owners = [p for p in primes if m in p.covers]
            if not owners:
                raise RuntimeError(f"Minterm {m} not covered by any prime implicant")
            chart[m] = owners

        selected: List[BnId] = []
        for m in self.minterms:
            owners = chart[m]
            if len(owners) == 1 and owners[0] not in selected:
                selected.append(owners[0])

        remaining = set(self.minterms)
        for p in selected:
            remaining -= p.covers

        if remaining:
            candidates = sorted((p for p in primes
                                 if p not in selected and p.covers & remaining),
                                key=BnId.sort_key)
            if len(candidates) <= exhaustive_limit:
                selected.extend(self._exhaustive_cover(candidates, remaining))
            else:
                logger.debug("Greedy cover over %d implicants", len(candidates))
                while remaining:
                    best = min(candidates,
                               key=lambda p: (-len(p.covers & remaining), p.sort_key()))
                    selected.append(best)
                    candidates.remove(best)
                    remaining -= best.covers
        return sorted(selected, key=BnId.sort_key)

    @staticmethod
    def _exhaustive_cover(candidates: List[BnId], remaining: set) -> List[BnId]:
        for size in range(1, len(candidates) + 1):
            best = None
            best_cost = None
            for combo in combinations(candidates, size):
                covered = set()
                for p in combo:
                    covered |= p.covers
                if not remaining <= covered:
                    continue
                cost = sum(len(p.literal_indices()) for p in combo)
                if best is None or cost < best_cost:
                    best, best_cost = combo, cost
            if best is not None:
                return list(best)
        raise RuntimeError("Prime implicants do not cover the minterms")

    def _literals(self, implicant: BnId, negate: bool = False) -> List[Literal]:
        lits = []
        for i in implicant.literal_indices():
            positive = (implicant.bits[i] == TRUE) != negate
            lits.append(Literal(self.alphabet[i] if positive else -self.alphabet[i]))
        if not lits:
            raise ValueError("Implicant with no fixed literal")
        return lits

    def to_rule(self, cover: List[BnId]) -> Rule:
        """Union of intersections, one per implicant."""
        if not cover:
            raise ValueError("Empty cover")
        terms: List[Rule] = []
        for implicant in cover:
            lits = self._literals(implicant)
            terms.append(lits[0] if len(lits) == 1 else Intersection(*lits))
        return terms[0] if len(terms) == 1 else Union(*terms)

    def to_pos_rule(self, cover: List[BnId]) -> Rule:
        """Intersection of unions from a cover of the false minterms.

        Each implicant of the complement is negated into one clause.
        """
        if not cover:
            raise ValueError("Empty cover")
        clauses: List[Rule] = []
        for implicant in cover:
            lits = self._literals(implicant, negate=True)
            clauses.append(lits[0] if len(lits) == 1 else Union(*lits))
        return clauses[0] if len(clauses) == 1 else Intersection(*clauses)

    def display(self) -> str:
        """Sum-of-minterms form over the alphabet."""
        return " + ".join(BnId.from_minterm(m, self.size).display(self.alphabet)
                          for m in self.minterms)

    def __repr__(self) -> str:
        return f"Acomp(alphabet={self.alphabet}, minterms={len(self.minterms)})"
