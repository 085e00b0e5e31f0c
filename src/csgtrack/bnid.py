# SPDX-FileCopyrightText: 2026 Giovanni MARIANO
#
# SPDX-License-Identifier: MPL-2.0

"""
Ternary implicant vectors for Quine-McCluskey reduction.
"""

from __future__ import annotations
from typing import FrozenSet, Iterable, List, Optional, Sequence, Tuple

TRUE = 1
FALSE = -1
DONT_CARE = 0


class BnId:
    """One implicant: a TRUE / FALSE / DONT_CARE value per literal index.

    Attributes:
        bits: Tuple of ternary values; index i is literal i of the alphabet.
        covers: Minterm indices (bit i of the index = literal i) covered.
        pi: True while the implicant is still a prime implicant candidate.
    """

    __slots__ = ('bits', 'covers', 'pi')

    def __init__(self, bits: Sequence[int], covers: Iterable[int] = (),
                 pi: bool = True):
        self.bits: Tuple[int, ...] = tuple(bits)
        self.covers: FrozenSet[int] = frozenset(covers)
        self.pi = pi

    @classmethod
    def from_minterm(cls, index: int, size: int) -> 'BnId':
        """Fully specified implicant for a single minterm."""
        bits = [TRUE if (index >> i) & 1 else FALSE for i in range(size)]
        return cls(bits, (index,))

    def __len__(self) -> int:
        return len(self.bits)

    def true_count(self) -> int:
        return sum(1 for b in self.bits if b == TRUE)

    def dont_care_count(self) -> int:
        return sum(1 for b in self.bits if b == DONT_CARE)

    def literal_indices(self) -> List[int]:
        """Indices of the fixed (non don't-care) positions."""
        return [i for i, b in enumerate(self.bits) if b != DONT_CARE]

    def make_combination(self, other: 'BnId') -> Optional['BnId']:
        """Merge with other if they differ in exactly one fixed position.

        Both must share the same don't-care positions. The result has a
        don't-care at the differing position and covers both minterm sets.

        Returns:
            The merged BnId, or None if the two cannot be combined.
        """
        if len(self.bits) != len(other.bits):
            raise ValueError("BnId sizes differ")
        diff = -1
        for i, (a, b) in enumerate(zip(self.bits, other.bits)):
            if a == b:
                continue
            if a == DONT_CARE or b == DONT_CARE or diff >= 0:
                return None
            diff = i
        if diff < 0:
            return None
        bits = list(self.bits)
        bits[diff] = DONT_CARE
        return BnId(bits, self.covers | other.covers)

    def covers_minterm(self, index: int) -> bool:
        """True if the minterm with this index satisfies the implicant."""
        for i, b in enumerate(self.bits):
            if b == DONT_CARE:
                continue
            if ((index >> i) & 1) != (b == TRUE):
                return False
        return True

    def sort_key(self) -> Tuple:
        """Cover preference: most don't-cares, then lowest literal index."""
        fixed = self.literal_indices()
        return (-self.dont_care_count(), fixed[0] if fixed else -1,
                tuple(fixed), tuple(-b for b in self.bits))

    def display(self, alphabet: Optional[Sequence[int]] = None) -> str:
        """Implicant as literals (with alphabet) or as a 1/0/- pattern."""
        if alphabet is None:
            return "".join({TRUE: '1', FALSE: '0', DONT_CARE: '-'}[b]
                           for b in self.bits)
        parts = [str(alphabet[i] if b == TRUE else -alphabet[i])
                 for i, b in enumerate(self.bits) if b != DONT_CARE]
        return " ".join(parts)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BnId):
            return NotImplemented
        return self.bits == other.bits

    def __hash__(self) -> int:
        return hash(self.bits)

    def __repr__(self) -> str:
        return f"BnId({self.display()}, covers={sorted(self.covers)})"
