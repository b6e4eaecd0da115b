"""Move rules of Nim.

A move removes a contiguous run of sticks from one pile. Depending on where the run lies, the
pile disappears, shrinks, or is split in two.
"""

from __future__ import annotations

import enum
from typing import List, Sequence, Tuple

# Pile sizes and the number of piles travel as single bytes on the wire.
MAX_PILE_SIZE = 255
MAX_PILE_COUNT = 255


class MoveKind(enum.Enum):
  REMOVE_PILE = "remove pile"
  SHRINK = "shrink"
  SPLIT = "split"


class IllegalMoveError(ValueError):
  """The requested move is not allowed in the current position."""


def validate_starting_piles(piles: Sequence[int]) -> List[int]:
  """Check a starting position and return it as a new list.

  Raises:
    ValueError: if there are no piles, too many piles, or a pile outside 1..255.
  """
  piles = list(piles)
  if len(piles) == 0:
    raise ValueError("At least one pile is required")
  if len(piles) > MAX_PILE_COUNT:
    raise ValueError(f"At most {MAX_PILE_COUNT} piles are supported, got {len(piles)}")
  for i, size in enumerate(piles):
    if not isinstance(size, int) or not 1 <= size <= MAX_PILE_SIZE:
      raise ValueError(f"Pile {i} has size {size!r}, must be between 1 and {MAX_PILE_SIZE}")
  return piles


def apply_move(
  piles: Sequence[int], pile: int, start: int, amount: int
) -> Tuple[List[int], MoveKind]:
  """Compute the position after removing sticks `start` .. `start + amount - 1` of `pile`.

  `piles` is not modified.

  Returns:
    The new piles and the kind of move.

  Raises:
    IllegalMoveError: if the pile does not exist, the range is empty or does not lie inside the
      pile, or a split would create more piles than the wire format can carry.
  """
  if not 0 <= pile < len(piles):
    raise IllegalMoveError(f"There is no pile {pile}")
  size = piles[pile]
  if start < 0 or amount < 1:
    raise IllegalMoveError(f"Cannot take {amount} sticks starting at {start}")
  if start + amount > size:
    raise IllegalMoveError(
      f"Pile {pile} has only {size} sticks, cannot take sticks {start}..{start + amount - 1}"
    )

  new_piles = list(piles)
  if start == 0 and amount == size:
    del new_piles[pile]
    return new_piles, MoveKind.REMOVE_PILE

  if start == 0 or start + amount == size:
    new_piles[pile] = size - amount
    return new_piles, MoveKind.SHRINK

  if len(piles) + 1 > MAX_PILE_COUNT:
    raise IllegalMoveError(f"Splitting would exceed {MAX_PILE_COUNT} piles")
  new_piles[pile : pile + 1] = [start, size - start - amount]
  return new_piles, MoveKind.SPLIT
