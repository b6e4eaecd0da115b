"""Opcodes of the Nim wire protocol.

Every message starts with a single opcode byte. Requests (client to server) and notifications
(server to client) use separate vocabularies, and some byte values appear in both, so a decoder
must know which direction it is reading.
"""

from __future__ import annotations

import enum


class Direction(enum.Enum):
  """Which vocabulary a stream carries."""

  REQUEST = "request"  # client -> server
  NOTIFICATION = "notification"  # server -> client


class RequestOpcode(enum.IntEnum):
  """Client to server."""

  JOIN = ord("J")
  MOVE_REQUEST = ord("M")
  NEW_GAME = ord("N")
  QUIT = ord("Q")


class NotificationOpcode(enum.IntEnum):
  """Server to client."""

  MOVE_MADE = ord("M")
  WAITING_OTHER_PLAYER = ord("P")
  MY_TURN = ord("T")
  OTHER_TURN = ord("U")
  YOU_WON = ord("W")
  OTHER_WIN = ord("O")
  NEW_GAME = ord("N")
  QUIT = ord("Q")


MAX_BYTE = 0xFF
MAX_STRING_BYTES = 0xFFFF
