import asyncio
import logging
import socket
from typing import Optional

from pynim.io.errors import EndOfStream, TransportError
from pynim.io.io import LOG_LEVEL_IO, IOBase

logger = logging.getLogger(__name__)


class Socket(IOBase):
  """IO for reading/writing to a TCP socket.

  Either connects to `host`:`port` in `setup`, or wraps the streams of a connection that was
  already accepted by a server (see `from_streams`).
  """

  def __init__(
    self,
    host: str,
    port: int,
    reader: Optional[asyncio.StreamReader] = None,
    writer: Optional[asyncio.StreamWriter] = None,
  ):
    self._host = host
    self._port = port
    self._reader = reader
    self._writer = writer
    self._write_lock = asyncio.Lock()
    self._closed = False

  @classmethod
  def from_streams(cls, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> "Socket":
    peer = writer.get_extra_info("peername")
    host, port = (peer[0], peer[1]) if isinstance(peer, tuple) else ("?", 0)
    io = cls(host=host, port=port, reader=reader, writer=writer)
    io._set_nodelay()
    return io

  @property
  def closed(self) -> bool:
    return self._closed

  @property
  def peer(self) -> str:
    return f"{self._host}:{self._port}"

  async def setup(self):
    if self._writer is not None:
      return
    try:
      self._reader, self._writer = await asyncio.open_connection(self._host, self._port)
    except OSError as e:
      raise TransportError(
        f"Could not connect to {self.peer}: {e}", operation="connect", original_error=e
      ) from e
    self._set_nodelay()

  def _set_nodelay(self):
    assert self._writer is not None
    sock = self._writer.get_extra_info("socket")
    if sock is not None and sock.family in (socket.AF_INET, socket.AF_INET6):
      sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)

  async def stop(self):
    """Close the connection. Only the first call has an effect."""
    if self._closed:
      return
    self._closed = True
    if self._writer is None:
      return

    logger.info("Closing connection to %s", self.peer)
    try:
      self._writer.close()
      await self._writer.wait_closed()
    except OSError as e:
      logger.warning("Error while closing socket connection: %s", e)

  async def write(self, data: bytes) -> None:
    """Write `data` and wait until it is flushed to the transport.

    Raises:
      TransportError: if the connection is closed or the write fails.
    """
    assert self._writer is not None, "forgot to call setup?"

    async with self._write_lock:
      if self._closed or self._writer.is_closing():
        raise TransportError(f"Connection to {self.peer} is closed", operation="write")
      try:
        self._writer.write(data)
        await self._writer.drain()
      except (ConnectionError, OSError) as e:
        logger.error("write error: %r", e)
        raise TransportError(
          f"Failed to write to {self.peer}: {e}", operation="write", original_error=e
        ) from e
      logger.log(LOG_LEVEL_IO, "[%s] write %s", self.peer, data.hex())

  async def read(self, num_bytes: int) -> bytes:
    """Read exactly `num_bytes` bytes, waiting as long as it takes.

    Raises:
      EndOfStream: if the peer closed the connection first.
      TransportError: if the read fails.
    """
    assert self._reader is not None, "forgot to call setup?"
    try:
      data = await self._reader.readexactly(num_bytes)
    except asyncio.IncompleteReadError as e:
      raise EndOfStream(expected=num_bytes, partial=e.partial) from e
    except (ConnectionError, OSError) as e:
      raise TransportError(
        f"Failed to read from {self.peer}: {e}", operation="read", original_error=e
      ) from e
    logger.log(LOG_LEVEL_IO, "[%s] read %s", self.peer, data.hex())
    return data
