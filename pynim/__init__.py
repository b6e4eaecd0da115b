import datetime
import logging
from pathlib import Path
from typing import Optional, Union

from pynim.__version__ import __version__
from pynim.config import Config, load_config

CONFIG_FILE_NAME = "pynim"

CONFIG = load_config(CONFIG_FILE_NAME, create_default=False)

_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def project_root() -> Path:
  """The directory that contains the `pynim` package."""
  return Path(__file__).parent.parent


def setup_logger(log_dir: Optional[Union[Path, str]], level: int):
  """Set the level of the `pynim` logger and, if `log_dir` is given, log to a dated file in it.

  Calling this again replaces the file handler of the previous call. `log_dir` is created if it
  does not exist.
  """
  logger = logging.getLogger("pynim")
  logger.setLevel(level)

  for handler in list(logger.handlers):
    if isinstance(handler, logging.FileHandler):
      logger.removeHandler(handler)
      handler.close()

  if log_dir is None:
    return
  log_dir = Path(log_dir)
  log_dir.mkdir(parents=True, exist_ok=True)
  today = datetime.date.today().strftime("%Y%m%d")
  fh = logging.FileHandler(log_dir / f"pynim-{today}.log")
  fh.setLevel(logging.NOTSET)  # the logger level filters
  fh.setFormatter(logging.Formatter(_FORMAT))
  logger.addHandler(fh)


def add_console_handler(level: int = logging.INFO) -> logging.Handler:
  """Also print records of at least `level` to stderr. Used by the command line programs."""
  logger = logging.getLogger("pynim")
  handler = logging.StreamHandler()
  handler.setLevel(level)
  handler.setFormatter(logging.Formatter("%(asctime)s - %(levelname)s - %(message)s"))
  logger.addHandler(handler)
  if logger.getEffectiveLevel() > level:
    logger.setLevel(level)
  return handler


def configure(cfg: Config):
  """Configure pynim."""
  setup_logger(cfg.logging.log_dir, cfg.logging.level)


configure(CONFIG)
