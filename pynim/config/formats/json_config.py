import json
from typing import IO

from pynim.config.config import Config
from pynim.config.formats import ConfigLoader, ConfigSaver


class JsonLoader(ConfigLoader):
  """Loads a `pynim.json` file: an object with optional `logging`, `game` and `network` keys."""

  extension = "json"

  def load(self, r: IO) -> Config:
    try:
      config_dict = json.load(r)
    except json.JSONDecodeError as e:
      raise ValueError(f"not valid JSON: {e}") from e
    if not isinstance(config_dict, dict):
      raise ValueError(f"expected a JSON object, got {type(config_dict).__name__}")
    return Config.from_dict(config_dict)


class JsonSaver(ConfigSaver):
  extension = "json"

  def save(self, w: IO, cfg: Config):
    json.dump(cfg.as_dict, w, indent=2)
    w.write("\n")
