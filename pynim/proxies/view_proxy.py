from __future__ import annotations

import logging
from typing import Sequence

from pynim.game.listener import ModelListener, ViewListener
from pynim.io.errors import TransportError
from pynim.io.io import IOBase
from pynim.protocol import (
  Direction,
  Join,
  Message,
  MoveMade,
  MoveRequest,
  MyTurn,
  NewGame,
  NewGameRequest,
  OtherTurn,
  OtherWin,
  Quit,
  QuitRequest,
  UnknownOpcodeError,
  WaitingForOtherPlayer,
  YouWon,
)
from pynim.proxies.channel import Channel

logger = logging.getLogger(__name__)


class ViewProxy(Channel, ModelListener):
  """The server's end of a connection to one player.

  To the game, this is the player's view: notifications are encoded and sent to the client.
  Requests from the client are dispatched to the game, naming this proxy as the requesting view.

  A notification that cannot be delivered closes the connection instead of raising into the game,
  so the game can go on notifying the other player. The dispatch loop then ends and reports the
  quit.
  """

  incoming = Direction.REQUEST

  def __init__(self, io: IOBase):
    super().__init__(io)
    self._broken = False

  @property
  def listener(self) -> ViewListener:
    assert self._listener is not None, "forgot to call set_listener?"
    return self._listener

  def set_listener(self, listener: ViewListener) -> None:
    self._listener = listener

  async def _dispatch(self, message: Message) -> None:
    if isinstance(message, Join):
      await self.listener.join(self, message.name)
    elif isinstance(message, MoveRequest):
      await self.listener.move_request(self, message.pile, message.start, message.amount)
    elif isinstance(message, NewGameRequest):
      await self.listener.new_game(self)
    elif isinstance(message, QuitRequest):
      await self._peer_quit()
    else:
      raise UnknownOpcodeError(message.opcode, self.incoming.value)

  async def _deliver_quit(self) -> None:
    await self.listener.quit(self)

  async def _notify(self, message: Message) -> None:
    if self._broken:
      logger.debug("Not sending %s, connection is gone", message)
      return
    try:
      await self._send(message)
    except TransportError as e:
      self._broken = True
      logger.warning("Could not notify player, closing connection: %s", e)
      await self.io.stop()

  async def quit(self) -> None:
    await self._notify(Quit())

  async def move_made(self, piles: Sequence[int]) -> None:
    await self._notify(MoveMade(piles))

  async def waiting_for_other_player(self) -> None:
    await self._notify(WaitingForOtherPlayer())

  async def my_turn(self) -> None:
    await self._notify(MyTurn())

  async def other_turn(self, name: str) -> None:
    await self._notify(OtherTurn(name))

  async def you_won(self) -> None:
    await self._notify(YouWon())

  async def other_win(self, name: str) -> None:
    await self._notify(OtherWin(name))

  async def new_game(self, piles: Sequence[int]) -> None:
    await self._notify(NewGame(piles))
