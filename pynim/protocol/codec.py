"""Encoding and decoding of Nim wire messages."""

from __future__ import annotations

import logging
from typing import Dict, Type

from pynim.io.binary import Reader, Writer
from pynim.io.errors import EndOfStream
from pynim.io.io import IOBase
from pynim.protocol.errors import MalformedMessageError, TruncatedMessageError, UnknownOpcodeError
from pynim.protocol.messages import NOTIFICATIONS, REQUESTS, Message
from pynim.protocol.opcodes import Direction

logger = logging.getLogger(__name__)

_VOCABULARY: Dict[Direction, Dict[int, Type[Message]]] = {
  Direction.REQUEST: {int(m.opcode): m for m in REQUESTS},
  Direction.NOTIFICATION: {int(m.opcode): m for m in NOTIFICATIONS},
}


def encode(message: Message) -> bytes:
  """Encode a message as its opcode byte followed by its payload.

  Raises:
    FieldRangeError: if a field does not fit in its wire representation.
  """
  w = Writer()
  w.u8(message.opcode)
  message.write_payload(w)
  return w.getvalue()


async def decode(io: IOBase, direction: Direction) -> Message:
  """Read one complete message from `io`, waiting until all of its bytes have arrived.

  Args:
    io: The stream to read from.
    direction: The vocabulary of the stream: requests on the server, notifications on the client.

  Raises:
    EndOfStream: if the stream ended cleanly, i.e. before the first byte of a message.
    UnknownOpcodeError: if the opcode is not part of the vocabulary for `direction`.
    TruncatedMessageError: if the stream ended in the middle of a message.
    MalformedMessageError: if a name is not valid UTF-8.
  """
  reader = Reader(io)
  opcode = await reader.u8()

  message_type = _VOCABULARY[direction].get(opcode)
  if message_type is None:
    raise UnknownOpcodeError(opcode, direction.value)

  try:
    message = await message_type.read_payload(reader)
  except EndOfStream as e:
    raise TruncatedMessageError(
      f"Stream ended inside {message_type.__name__} after {reader.offset()} bytes"
    ) from e
  except UnicodeDecodeError as e:
    raise MalformedMessageError(f"{message_type.__name__} carries an invalid name: {e}") from e

  logger.debug("decoded %s", message)
  return message
