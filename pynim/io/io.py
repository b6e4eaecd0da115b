import logging
from abc import ABC, abstractmethod

LOG_LEVEL_IO = 5
logging.addLevelName(LOG_LEVEL_IO, "IO")


class IOBase(ABC):
  """A duplex byte stream."""

  @abstractmethod
  async def write(self, data: bytes, *args, **kwargs):
    pass

  @abstractmethod
  async def read(self, num_bytes: int, *args, **kwargs) -> bytes:
    """Read exactly `num_bytes` bytes.

    Raises:
      EndOfStream: if the peer closed the stream before `num_bytes` bytes arrived.
    """

  async def stop(self):
    pass
