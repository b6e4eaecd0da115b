"""Messages of the Nim wire protocol.

Each message knows its opcode and how to write and read its own payload:

  =====================  ======  ====================================
  message                opcode  payload
  =====================  ======  ====================================
  Join                   J       name
  MoveRequest            M       pile, start, amount (u8 each)
  NewGameRequest         N
  QuitRequest            Q
  MoveMade               M       count (u8), count x pile size (u8)
  WaitingForOtherPlayer  P
  MyTurn                 T
  OtherTurn              U       name
  YouWon                 W
  OtherWin               O       name
  NewGame                N       count (u8), count x pile size (u8)
  Quit                   Q
  =====================  ======  ====================================

Names are UTF-8, preceded by their byte length as a big-endian u16.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Tuple

from pynim.io.binary import Reader, Writer
from pynim.protocol.errors import FieldRangeError
from pynim.protocol.opcodes import (
  MAX_BYTE,
  MAX_STRING_BYTES,
  Direction,
  NotificationOpcode,
  RequestOpcode,
)


def _write_byte(w: Writer, field: str, value: int) -> None:
  if not isinstance(value, int) or not 0 <= value <= MAX_BYTE:
    raise FieldRangeError(field, value, MAX_BYTE)
  w.u8(value)


def _write_name(w: Writer, name: str) -> None:
  if len(name.encode("utf-8")) > MAX_STRING_BYTES:
    raise FieldRangeError("name", name, MAX_STRING_BYTES)
  w.prefixed_string(name)


def _write_piles(w: Writer, piles: Tuple[int, ...]) -> None:
  _write_byte(w, "pile count", len(piles))
  for i, size in enumerate(piles):
    _write_byte(w, f"piles[{i}]", size)


async def _read_piles(reader: Reader) -> Tuple[int, ...]:
  count = await reader.u8()
  return tuple([await reader.u8() for _ in range(count)])


@dataclass(frozen=True)
class Message:
  """Base class of all messages."""

  opcode: ClassVar[int]
  direction: ClassVar[Direction]

  def write_payload(self, w: Writer) -> None:
    pass

  @classmethod
  async def read_payload(cls, reader: Reader) -> "Message":
    return cls()


@dataclass(frozen=True)
class _PilesMessage(Message):
  piles: Tuple[int, ...]

  def __post_init__(self):
    object.__setattr__(self, "piles", tuple(self.piles))

  def write_payload(self, w: Writer) -> None:
    _write_piles(w, self.piles)

  @classmethod
  async def read_payload(cls, reader: Reader) -> "Message":
    return cls(await _read_piles(reader))


@dataclass(frozen=True)
class _NameMessage(Message):
  name: str

  def write_payload(self, w: Writer) -> None:
    _write_name(w, self.name)

  @classmethod
  async def read_payload(cls, reader: Reader) -> "Message":
    return cls(await reader.prefixed_string())


# requests


@dataclass(frozen=True)
class Join(_NameMessage):
  opcode: ClassVar[int] = RequestOpcode.JOIN
  direction: ClassVar[Direction] = Direction.REQUEST


@dataclass(frozen=True)
class MoveRequest(Message):
  opcode: ClassVar[int] = RequestOpcode.MOVE_REQUEST
  direction: ClassVar[Direction] = Direction.REQUEST

  pile: int
  start: int
  amount: int

  def write_payload(self, w: Writer) -> None:
    _write_byte(w, "pile", self.pile)
    _write_byte(w, "start", self.start)
    _write_byte(w, "amount", self.amount)

  @classmethod
  async def read_payload(cls, reader: Reader) -> "Message":
    pile = await reader.u8()
    start = await reader.u8()
    amount = await reader.u8()
    return cls(pile=pile, start=start, amount=amount)


@dataclass(frozen=True)
class NewGameRequest(Message):
  opcode: ClassVar[int] = RequestOpcode.NEW_GAME
  direction: ClassVar[Direction] = Direction.REQUEST


@dataclass(frozen=True)
class QuitRequest(Message):
  opcode: ClassVar[int] = RequestOpcode.QUIT
  direction: ClassVar[Direction] = Direction.REQUEST


# notifications


@dataclass(frozen=True)
class MoveMade(_PilesMessage):
  opcode: ClassVar[int] = NotificationOpcode.MOVE_MADE
  direction: ClassVar[Direction] = Direction.NOTIFICATION


@dataclass(frozen=True)
class WaitingForOtherPlayer(Message):
  opcode: ClassVar[int] = NotificationOpcode.WAITING_OTHER_PLAYER
  direction: ClassVar[Direction] = Direction.NOTIFICATION


@dataclass(frozen=True)
class MyTurn(Message):
  opcode: ClassVar[int] = NotificationOpcode.MY_TURN
  direction: ClassVar[Direction] = Direction.NOTIFICATION


@dataclass(frozen=True)
class OtherTurn(_NameMessage):
  opcode: ClassVar[int] = NotificationOpcode.OTHER_TURN
  direction: ClassVar[Direction] = Direction.NOTIFICATION


@dataclass(frozen=True)
class YouWon(Message):
  opcode: ClassVar[int] = NotificationOpcode.YOU_WON
  direction: ClassVar[Direction] = Direction.NOTIFICATION


@dataclass(frozen=True)
class OtherWin(_NameMessage):
  opcode: ClassVar[int] = NotificationOpcode.OTHER_WIN
  direction: ClassVar[Direction] = Direction.NOTIFICATION


@dataclass(frozen=True)
class NewGame(_PilesMessage):
  opcode: ClassVar[int] = NotificationOpcode.NEW_GAME
  direction: ClassVar[Direction] = Direction.NOTIFICATION


@dataclass(frozen=True)
class Quit(Message):
  opcode: ClassVar[int] = NotificationOpcode.QUIT
  direction: ClassVar[Direction] = Direction.NOTIFICATION


REQUESTS = (Join, MoveRequest, NewGameRequest, QuitRequest)
NOTIFICATIONS = (
  MoveMade, WaitingForOtherPlayer, MyTurn, OtherTurn, YouWon, OtherWin, NewGame, Quit
)
