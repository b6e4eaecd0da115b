"""Binary data reading and writing utilities.

Fields are big-endian, matching the byte order of the Nim wire protocol.
"""

import struct

from pynim.io.io import IOBase


class Reader:
  """Reads typed fields from a stream, waiting for each field to arrive in full."""

  def __init__(self, source: IOBase):
    self._source = source
    self._offset = 0

  def offset(self) -> int:
    """Return the number of bytes consumed so far."""
    return self._offset

  async def raw_bytes(self, length: int) -> bytes:
    """Read raw bytes and advance the offset."""
    if length == 0:
      return b""
    result = await self._source.read(length)
    self._offset += length
    return result

  async def _read(self, fmt: str, size: int) -> int:
    """Read a value using struct format."""
    data = await self.raw_bytes(size)
    return int(struct.unpack(">" + fmt, data)[0])

  async def u8(self) -> int:
    """Read an unsigned 8-bit integer."""
    return await self._read("B", 1)

  async def u16(self) -> int:
    """Read an unsigned 16-bit integer."""
    return await self._read("H", 2)

  async def string(self, length: int, encoding: str = "utf-8") -> str:
    """Read a string of specified length. Invalid data raises UnicodeDecodeError."""
    return (await self.raw_bytes(length)).decode(encoding)

  async def prefixed_string(self, encoding: str = "utf-8") -> str:
    """Read a string preceded by its unsigned 16-bit byte length."""
    length = await self.u16()
    return await self.string(length, encoding=encoding)


class Writer:
  """Accumulates typed fields into a byte string."""

  def __init__(self):
    self._buffer = bytearray()

  def _write(self, fmt: str, value: int, lo: int, hi: int) -> None:
    if not lo <= value <= hi:
      raise ValueError(f"Value {value} does not fit in range [{lo}, {hi}]")
    self._buffer += struct.pack(">" + fmt, value)

  def u8(self, value: int) -> None:
    """Write an unsigned 8-bit integer."""
    self._write("B", value, 0, 0xFF)

  def u16(self, value: int) -> None:
    """Write an unsigned 16-bit integer."""
    self._write("H", value, 0, 0xFFFF)

  def prefixed_string(self, s: str, encoding: str = "utf-8") -> None:
    """Write a string preceded by its unsigned 16-bit byte length."""
    data = s.encode(encoding)
    self.u16(len(data))
    self._buffer += data

  def getvalue(self) -> bytes:
    return bytes(self._buffer)
