from __future__ import annotations

import asyncio
import logging
from abc import ABCMeta, abstractmethod
from typing import Any, ClassVar, Optional

from pynim.io.errors import EndOfStream, TransportError
from pynim.io.io import IOBase
from pynim.protocol import Direction, Message, ProtocolError, decode, encode

logger = logging.getLogger(__name__)


class Channel(metaclass=ABCMeta):
  """One end of a connection that carries Nim messages.

  Outgoing calls are encoded and written with one flushed write per call. Incoming messages are
  read by the dispatch loop (`run`), which turns each one into a call on the listener and waits
  for that call to finish before reading the next message.

  The loop ends when the peer closes the stream, when the stream breaks, or when the peer sends
  something that is not a valid message. In every case the listener is told that the peer quit
  (unless the peer already said so) and the connection is closed.
  """

  incoming: ClassVar[Direction]

  def __init__(self, io: IOBase):
    self.io = io
    self._listener: Any = None
    self._task: Optional[asyncio.Task] = None
    self._peer_quit_delivered = False
    self._running = False

  @property
  def running(self) -> bool:
    return self._running

  async def _send(self, message: Message) -> None:
    await self.io.write(encode(message))

  @abstractmethod
  async def _dispatch(self, message: Message) -> None:
    """Call the listener method that corresponds to `message`."""

  @abstractmethod
  async def _deliver_quit(self) -> None:
    """Tell the listener that the peer quit."""

  async def _peer_quit(self) -> None:
    if self._peer_quit_delivered:
      return
    self._peer_quit_delivered = True
    await self._deliver_quit()

  async def run(self) -> None:
    """Dispatch incoming messages until the connection ends, then clean up."""
    if self._listener is None:
      raise RuntimeError("Set a listener before running the channel.")
    if self._running:
      raise RuntimeError("The dispatch loop is already running.")
    self._running = True

    try:
      while True:
        message = await decode(self.io, self.incoming)
        await self._dispatch(message)
    except EndOfStream as e:
      if e.partial:
        logger.warning("Connection closed after a partial message: %s", e.partial.hex())
      else:
        logger.debug("Connection closed by peer")
    except ProtocolError as e:
      logger.error("Protocol error, closing connection: %s", e)
    except TransportError as e:
      logger.warning("Connection lost: %s", e)
    finally:
      try:
        await self._peer_quit()
      finally:
        await self.io.stop()
        self._running = False

  def start(self) -> asyncio.Task:
    """Run the dispatch loop in its own task."""
    if self._task is not None:
      raise RuntimeError("The dispatch loop was already started.")
    self._task = asyncio.create_task(self.run())
    return self._task

  async def wait_closed(self) -> None:
    """Wait for a dispatch loop started with `start` to end."""
    if self._task is not None:
      await self._task

  async def stop(self) -> None:
    """Close the connection. The dispatch loop notices and ends."""
    await self.io.stop()
    if self._task is not None:
      await self._task
