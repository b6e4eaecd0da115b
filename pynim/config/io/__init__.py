from abc import ABC, abstractmethod

from pynim.config.config import Config
from pynim.config.formats import ConfigLoader, ConfigSaver


class ConfigReader(ABC):
  """Reads a `Config` from some location, parsing it with a `ConfigLoader`.

  The location type depends on the reader, e.g. a path for `FileReader`.
  """

  def __init__(self, format_loader: ConfigLoader, encoding: str = "utf-8"):
    self.format_loader = format_loader
    self.encoding = encoding

  @abstractmethod
  def read(self, location) -> Config:
    """Raises `ValueError` if the contents cannot be parsed by `format_loader`."""


class ConfigWriter(ABC):
  """Writes a `Config` to some location, serializing it with a `ConfigSaver`."""

  def __init__(self, format_saver: ConfigSaver, encoding: str = "utf-8"):
    self.format_saver = format_saver
    self.encoding = encoding

  @abstractmethod
  def write(self, location, cfg: Config):
    pass
