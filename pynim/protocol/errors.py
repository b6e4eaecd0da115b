"""Wire protocol exception classes."""

from __future__ import annotations


class ProtocolError(Exception):
  """The byte stream does not follow the Nim wire protocol."""


class UnknownOpcodeError(ProtocolError):
  """An opcode byte that is not part of the expected vocabulary was received.

  Attributes:
    opcode: The offending byte.
    direction: The vocabulary the decoder was using.
  """

  def __init__(self, opcode: int, direction: str) -> None:
    self.opcode = opcode
    self.direction = direction
    super().__init__(f"Unknown {direction} opcode 0x{opcode:02X} ({chr(opcode)!r})")


class TruncatedMessageError(ProtocolError):
  """The stream ended in the middle of a message."""


class MalformedMessageError(ProtocolError):
  """A field could not be decoded, e.g. a name that is not valid UTF-8."""


class FieldRangeError(ProtocolError, ValueError):
  """A value cannot be represented in its wire field.

  Numeric fields are single unsigned bytes, so pile sizes, pile indices, move bounds and the
  number of piles are limited to 0..255. Names are limited to 65535 bytes of UTF-8.

  Attributes:
    field: The name of the field.
    value: The value that did not fit.
  """

  def __init__(self, field: str, value, limit: int) -> None:
    self.field = field
    self.value = value
    self.limit = limit
    super().__init__(f"{field}={value!r} does not fit in the wire format (0..{limit})")
