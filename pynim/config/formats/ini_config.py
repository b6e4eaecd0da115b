import configparser
from typing import IO

from pynim.config.config import Config, piles_to_string
from pynim.config.formats import ConfigLoader, ConfigSaver


class IniLoader(ConfigLoader):
  """A ConfigLoader that loads from an IO stream that INI formatted."""

  extension = "ini"

  def load(self, r: IO) -> Config:
    """Load a Config object from an opened IO stream that is INI formatted."""
    config = configparser.ConfigParser()
    try:
      config.read_file(r)
    except configparser.Error as e:
      raise ValueError(str(e)) from e
    return Config.from_dict({section: dict(config[section]) for section in config.sections()})


class IniSaver(ConfigSaver):
  """A ConfigSaver that saves to an IO stream in INI format."""

  extension = "ini"

  def save(self, w: IO, cfg: Config):
    """Save a Config object to an IO stream in INI format."""
    config = configparser.ConfigParser()
    for k, v in cfg.as_dict.items():
      v = {k_: v_ for k_, v_ in v.items() if v_ is not None}
      if "piles" in v:
        v["piles"] = piles_to_string(v["piles"])
      config[k] = {k_: str(v_) for k_, v_ in v.items()}

    config.write(w)
    return w
