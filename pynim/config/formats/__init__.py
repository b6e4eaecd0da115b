"""Config file formats. A loader parses an open text stream into a `Config`, a saver does the
reverse. Loaders raise `ValueError` for content they cannot parse."""

from abc import ABC, abstractmethod
from typing import IO, List

from pynim.config.config import Config


class ConfigLoader(ABC):
  extension: str

  @abstractmethod
  def load(self, r: IO) -> Config:
    pass


class ConfigSaver(ABC):
  extension: str

  @abstractmethod
  def save(self, w: IO, cfg: Config):
    pass


class MultiLoader(ConfigLoader):
  """Tries each of its loaders in order, rewinding the stream before each attempt."""

  def __init__(self, loaders: List[ConfigLoader]):
    self.loaders = loaders

  def load(self, r: IO) -> Config:
    errors = []
    for loader in self.loaders:
      r.seek(0)
      try:
        return loader.load(r)
      except (ValueError, KeyError) as e:
        errors.append(f"{loader.extension}: {e}")
    raise ValueError(f"No loader could load file ({'; '.join(errors)}).")
