import logging
from pathlib import Path
from typing import Union

from pynim.config.config import Config
from pynim.config.io import ConfigReader, ConfigWriter

logger = logging.getLogger(__name__)


class FileReader(ConfigReader):
  """Reads a config file from disk."""

  def read(self, location: Union[str, Path]) -> Config:
    path = Path(location)
    logger.debug("Reading config from %s", path)
    with path.open("r", encoding=self.encoding) as f:
      try:
        return self.format_loader.load(f)
      except ValueError as e:
        raise ValueError(f"Invalid config file {path}: {e}") from e


class FileWriter(ConfigWriter):
  """Writes a config file to disk, creating missing parent directories."""

  def write(self, location: Union[str, Path], cfg: Config):
    path = Path(location)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding=self.encoding) as f:
      self.format_saver.save(f, cfg)
    logger.info("Wrote config to %s", path)
