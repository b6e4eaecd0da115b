import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

LOG_FROM_STRING = {
  "IO": 5,
  "DEBUG": logging.DEBUG,
  "INFO": logging.INFO,
  "WARNING": logging.WARNING,
  "ERROR": logging.ERROR,
  "CRITICAL": logging.CRITICAL,
}

LOG_TO_STRING = {v: k for k, v in LOG_FROM_STRING.items()}

DEFAULT_PILES = [3, 4, 5]


def _default_piles() -> List[int]:
  return list(DEFAULT_PILES)


def piles_from_string(s: str) -> List[int]:
  """Parse a pile list such as ``"3, 4, 5"`` or ``"3 4 5"``."""
  return [int(p) for p in s.replace(",", " ").split()]


def piles_to_string(piles: List[int]) -> str:
  return ",".join(str(p) for p in piles)


def _to_bool(v) -> bool:
  if isinstance(v, bool):
    return v
  return str(v).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Config:
  """The configuration object for pynim."""

  @dataclass
  class Logging:
    """The logging configuration."""

    level: int = logging.INFO
    log_dir: Optional[Path] = None

  @dataclass
  class Game:
    """Starting position and event logging of every game the server hosts."""

    piles: List[int] = field(default_factory=_default_piles)
    verbose: bool = False

  @dataclass
  class Network:
    """Where the server listens and where clients connect to."""

    host: str = "localhost"
    port: int = 5678

  logging: Logging = field(default_factory=Logging)
  game: Game = field(default_factory=Game)
  network: Network = field(default_factory=Network)

  @classmethod
  def from_dict(cls, d: dict) -> "Config":
    log_d = d.get("logging", {})
    game_d = d.get("game", {})
    net_d = d.get("network", {})

    piles = game_d.get("piles", DEFAULT_PILES)
    if isinstance(piles, str):
      piles = piles_from_string(piles)

    return cls(
      logging=cls.Logging(
        level=LOG_FROM_STRING[log_d.get("level", "INFO")],
        log_dir=Path(log_d["log_dir"]) if log_d.get("log_dir") is not None else None,
      ),
      game=cls.Game(
        piles=[int(p) for p in piles],
        verbose=_to_bool(game_d.get("verbose", False)),
      ),
      network=cls.Network(
        host=net_d.get("host", "localhost"),
        port=int(net_d.get("port", 5678)),
      ),
    )

  @property
  def as_dict(self) -> dict:
    return {
      "logging": {
        "level": LOG_TO_STRING[self.logging.level],
        "log_dir": str(self.logging.log_dir) if self.logging.log_dir is not None else None,
      },
      "game": {
        "piles": list(self.game.piles),
        "verbose": self.game.verbose,
      },
      "network": {
        "host": self.network.host,
        "port": self.network.port,
      },
    }
