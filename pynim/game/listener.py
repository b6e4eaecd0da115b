from __future__ import annotations

from abc import ABCMeta, abstractmethod
from typing import Sequence


class ModelListener(metaclass=ABCMeta):
  """Receives the events of one player's game.

  Implemented by views that run in the same process as the caller, and by the server-side proxy
  that forwards each event to a remote player.
  """

  @abstractmethod
  async def quit(self) -> None:
    """The session has ended."""

  @abstractmethod
  async def move_made(self, piles: Sequence[int]) -> None:
    """A move was accepted; `piles` is the new position."""

  @abstractmethod
  async def waiting_for_other_player(self) -> None:
    pass

  @abstractmethod
  async def my_turn(self) -> None:
    """It is this player's turn. Also sent again after an invalid move."""

  @abstractmethod
  async def other_turn(self, name: str) -> None:
    pass

  @abstractmethod
  async def you_won(self) -> None:
    pass

  @abstractmethod
  async def other_win(self, name: str) -> None:
    pass

  @abstractmethod
  async def new_game(self, piles: Sequence[int]) -> None:
    """A game (re)started from `piles`."""


class ViewListener(metaclass=ABCMeta):
  """Receives the requests of players.

  Implemented by the game model, and by the client-side proxy that forwards each request to the
  server. Every request names the `ModelListener` of the player who made it.
  """

  @abstractmethod
  async def join(self, view: ModelListener, name: str) -> None:
    pass

  @abstractmethod
  async def move_request(self, view: ModelListener, pile: int, start: int, amount: int) -> None:
    """Remove `amount` sticks from pile `pile`, starting at stick `start` (zero indexed)."""

  @abstractmethod
  async def new_game(self, view: ModelListener) -> None:
    pass

  @abstractmethod
  async def quit(self, view: ModelListener) -> None:
    pass
