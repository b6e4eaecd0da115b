from __future__ import annotations

import logging

from pynim.game.listener import ModelListener, ViewListener
from pynim.io.io import IOBase
from pynim.io.socket import Socket
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


class ModelProxy(Channel, ViewListener):
  """The client's end of the connection to the server.

  To the player's view, this is the game: requests are encoded and sent to the server, and raise
  `TransportError` if that fails. Notifications from the server are dispatched to the view.

  The server knows the player by its connection, so the `view` argument of the requests is not
  sent.
  """

  incoming = Direction.NOTIFICATION

  @classmethod
  async def connect(cls, host: str, port: int) -> "ModelProxy":
    """Open a connection to a Nim server.

    Raises:
      TransportError: if the server cannot be reached.
    """
    io = Socket(host=host, port=port)
    await io.setup()
    logger.info("Connected to %s:%s", host, port)
    return cls(io)

  @property
  def listener(self) -> ModelListener:
    assert self._listener is not None, "forgot to call set_listener?"
    return self._listener

  def set_listener(self, listener: ModelListener) -> None:
    self._listener = listener

  async def _dispatch(self, message: Message) -> None:
    if isinstance(message, MoveMade):
      await self.listener.move_made(message.piles)
    elif isinstance(message, WaitingForOtherPlayer):
      await self.listener.waiting_for_other_player()
    elif isinstance(message, MyTurn):
      await self.listener.my_turn()
    elif isinstance(message, OtherTurn):
      await self.listener.other_turn(message.name)
    elif isinstance(message, YouWon):
      await self.listener.you_won()
    elif isinstance(message, OtherWin):
      await self.listener.other_win(message.name)
    elif isinstance(message, NewGame):
      await self.listener.new_game(message.piles)
    elif isinstance(message, Quit):
      await self._peer_quit()
    else:
      raise UnknownOpcodeError(message.opcode, self.incoming.value)

  async def _deliver_quit(self) -> None:
    await self.listener.quit()

  async def join(self, view: ModelListener, name: str) -> None:
    await self._send(Join(name))

  async def move_request(self, view: ModelListener, pile: int, start: int, amount: int) -> None:
    await self._send(MoveRequest(pile=pile, start=start, amount=amount))

  async def new_game(self, view: ModelListener) -> None:
    await self._send(NewGameRequest())

  async def quit(self, view: ModelListener) -> None:
    await self._send(QuitRequest())
