from __future__ import annotations

import asyncio
import enum
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from pynim.game.listener import ModelListener, ViewListener
from pynim.game.piles import IllegalMoveError, MoveKind, apply_move, validate_starting_piles

logger = logging.getLogger(__name__)


class GameState(enum.Enum):
  AWAITING_SECOND_PLAYER = "awaiting second player"
  IN_PROGRESS = "in progress"
  FINISHED = "finished"


@dataclass
class Player:
  name: str
  view: ModelListener


class NimModel(ViewListener):
  """The rules and the authoritative state of one game of Nim between two players.

  The first player to join waits for the second one; the second join starts the game with the
  first player to move. Every operation runs under one lock, and all notifications of an
  operation are sent before the lock is released, so both players see the same order of events.

  Moves are validated by `pynim.game.piles.apply_move`. An invalid move changes nothing and the
  player is asked to move again. Taking the last pile wins.

  A win finishes the game; `new_game` may restart it while both players are still around. A quit
  ends the session for good.
  """

  def __init__(self, piles: Sequence[int], verbose: bool = False):
    """
    Args:
      piles: The starting size of each pile, 1..255 each.
      verbose: Log game events at INFO instead of DEBUG.

    Raises:
      ValueError: if `piles` is not a valid starting position.
    """
    self._original_piles: Tuple[int, ...] = tuple(validate_starting_piles(piles))
    self._piles: List[int] = []
    self._players: List[Player] = []
    self._current: Optional[Player] = None
    self._state = GameState.AWAITING_SECOND_PLAYER
    self._quit = False
    self._lock = asyncio.Lock()
    self.verbose = verbose

  @property
  def state(self) -> GameState:
    return self._state

  @property
  def finished(self) -> bool:
    return self._state is GameState.FINISHED

  @property
  def ended_by_quit(self) -> bool:
    return self._quit

  @property
  def piles(self) -> List[int]:
    """A copy of the current piles."""
    return list(self._piles)

  @property
  def original_piles(self) -> Tuple[int, ...]:
    return self._original_piles

  @property
  def players(self) -> Tuple[str, ...]:
    return tuple(p.name for p in self._players)

  @property
  def current_player(self) -> Optional[str]:
    return self._current.name if self._current is not None else None

  def _log(self, msg: str, *args) -> None:
    names = [p.name for p in self._players] + ["?", "?"]
    logger.log(
      logging.INFO if self.verbose else logging.DEBUG,
      "%s vs. %s " + msg,
      names[0],
      names[1],
      *args,
    )

  def _player_for(self, view: ModelListener) -> Optional[Player]:
    for p in self._players:
      if p.view is view:
        return p
    return None

  def _opponent_of(self, player: Player) -> Player:
    return self._players[1] if player is self._players[0] else self._players[0]

  async def _start_game(self) -> None:
    self._piles = list(self._original_piles)
    self._state = GameState.IN_PROGRESS
    self._current = self._players[0]
    for p in self._players:
      await p.view.new_game(tuple(self._piles))
    await self._announce_turn()
    self._log("start game, piles: %s", self._piles)

  async def _announce_turn(self) -> None:
    assert self._current is not None
    for p in self._players:
      if p is self._current:
        await p.view.my_turn()
      else:
        await p.view.other_turn(self._current.name)

  async def join(self, view: ModelListener, name: str) -> None:
    async with self._lock:
      if self._quit:
        logger.info("%s joined a session that has ended, sending quit", name)
        await view.quit()
        return
      if self._player_for(view) is not None:
        logger.warning("%s joined twice, ignoring", name)
        return
      if len(self._players) >= 2:
        logger.warning("Session %s vs. %s is full, ignoring join of %s", *self.players, name)
        return

      self._players.append(Player(name=name, view=view))
      if len(self._players) == 1:
        await view.waiting_for_other_player()
        self._log("waiting for second player")
      else:
        await self._start_game()

  async def move_request(self, view: ModelListener, pile: int, start: int, amount: int) -> None:
    async with self._lock:
      if self._state is not GameState.IN_PROGRESS:
        logger.debug("Move request while %s, ignoring", self._state.value)
        return
      player = self._player_for(view)
      if player is None:
        logger.warning("Move request from a view that is not part of this game, ignoring")
        return
      assert self._current is not None
      if player is not self._current:
        logger.info("%s tried to move during the turn of %s", player.name, self._current.name)
        await view.other_turn(self._current.name)
        return

      try:
        new_piles, kind = apply_move(self._piles, pile, start, amount)
      except IllegalMoveError as e:
        self._log("invalid move by %s: %s", player.name, e)
        await view.my_turn()
        return

      self._piles = new_piles
      self._log(
        "%s: %s (pile=%d, start=%d, amount=%d)", player.name, kind.value, pile, start, amount
      )

      if kind is MoveKind.REMOVE_PILE and len(self._piles) == 0:
        self._state = GameState.FINISHED
        for p in self._players:
          if p is player:
            await p.view.you_won()
          else:
            await p.view.other_win(player.name)
        self._log("%s wins, game over", player.name)
        return

      for p in self._players:
        await p.view.move_made(tuple(self._piles))
      self._log("new state: %s", self._piles)

      self._current = self._opponent_of(player)
      await self._announce_turn()
      self._log("whose turn: %s", self._current.name)

  async def new_game(self, view: ModelListener) -> None:
    async with self._lock:
      if self._quit or len(self._players) < 2:
        logger.debug("New game requested while no game can be played, ignoring")
        return
      if self._player_for(view) is None:
        logger.warning("New game requested by a view that is not part of this game, ignoring")
        return
      self._log("restarting game")
      await self._start_game()

  async def quit(self, view: Optional[ModelListener] = None) -> None:
    """End the session and tell every player. Later calls have no effect."""
    async with self._lock:
      if self._quit:
        return
      self._quit = True
      self._state = GameState.FINISHED
      self._current = None
      for p in self._players:
        await p.view.quit()
      quitter = self._player_for(view) if view is not None else None
      self._log("ending game (%s quit)", quitter.name if quitter is not None else "a player")
