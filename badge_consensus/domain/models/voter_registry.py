"""Voter registry domain model.

The voter registry is the fixed set of identities allowed to approve badge
issuance and invalidation. It is established once at construction and never
changes afterwards.

The registry keeps two views of the same input:
- an ordered tuple, one slot per input entry, used for enumeration and as the
  unanimity threshold (``size``)
- a frozenset used for O(1) membership checks

Duplicate entries are NOT collapsed. A repeated identity occupies several
slots but can approve only once per round, so the threshold can never be met
for any target. ``reject_duplicates=True`` refuses such lists up front.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field

from badge_consensus.domain.errors.consensus import DuplicateVoterError


@dataclass(frozen=True)
class VoterRegistry:
    """Immutable, ordered set of authorized voter identities.

    Attributes:
        voters: Ordered voter identities, one entry per slot.

    Example:
        >>> registry = VoterRegistry.from_iterable(["0xA", "0xB", "0xC"])
        >>> registry.size
        3
        >>> registry.is_voter("0xB")
        True
    """

    voters: tuple[str, ...]
    _members: frozenset[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        """Build the membership view and validate entries.

        Raises:
            TypeError: If voters is not a tuple of strings.
            ValueError: If any voter identity is empty.
        """
        if not isinstance(self.voters, tuple):
            raise TypeError(
                f"voters must be a tuple, got {type(self.voters).__name__}"
            )
        for voter in self.voters:
            if not isinstance(voter, str):
                raise TypeError(
                    f"voter identity must be str, got {type(voter).__name__}"
                )
            if not voter:
                raise ValueError("voter identity must not be empty")
        object.__setattr__(self, "_members", frozenset(self.voters))

    @classmethod
    def from_iterable(
        cls,
        voters: Iterable[str],
        *,
        reject_duplicates: bool = False,
    ) -> VoterRegistry:
        """Create a registry from any iterable of identities.

        Args:
            voters: Voter identities in enumeration order.
            reject_duplicates: Refuse lists with repeated identities instead
                of keeping every entry as its own slot.

        Returns:
            A new VoterRegistry.

        Raises:
            DuplicateVoterError: If reject_duplicates is set and the input
                repeats an identity.
        """
        ordered = tuple(voters)
        if reject_duplicates:
            counts = Counter(ordered)
            duplicates = [voter for voter in counts if counts[voter] > 1]
            if duplicates:
                raise DuplicateVoterError(duplicates)
        return cls(voters=ordered)

    @property
    def size(self) -> int:
        """Number of voter slots, duplicates included (the unanimity threshold)."""
        return len(self.voters)

    @property
    def distinct_count(self) -> int:
        """Number of distinct voter identities."""
        return len(self._members)

    @property
    def has_duplicates(self) -> bool:
        """Whether some identity occupies more than one slot.

        A registry with duplicates can never reach unanimity.
        """
        return self.distinct_count != self.size

    def is_voter(self, identity: str) -> bool:
        """Check whether an identity is a registered voter."""
        return identity in self._members

    def __len__(self) -> int:
        return self.size

    def __iter__(self):
        return iter(self.voters)

    def __contains__(self, identity: object) -> bool:
        return identity in self._members
