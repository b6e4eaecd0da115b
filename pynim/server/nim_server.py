import argparse
import asyncio
import functools
import logging
import sys
from typing import Any, Awaitable, Callable, List, Optional, Sequence, Set, TypeVar

from pynim import CONFIG, __version__, add_console_handler
from pynim.__version__ import WIRE_PROTOCOL_VERSION
from pynim.game import NimModel, validate_starting_piles
from pynim.io.socket import Socket
from pynim.proxies import ViewProxy

if sys.version_info < (3, 10):
  from typing_extensions import ParamSpec
else:
  from typing import ParamSpec

logger = logging.getLogger(__name__)

_P = ParamSpec("_P")
_R = TypeVar("_R", bound=Awaitable[Any])


def need_setup_finished(func: Callable[_P, _R]) -> Callable[_P, _R]:
  """Decorator for methods that require the server to be listening.

  Raises:
    RuntimeError: If `setup` has not been called.
  """

  @functools.wraps(func)
  async def wrapper(*args, **kwargs):
    assert isinstance(args[0], NimServer), "The first argument must be a NimServer."
    self = args[0]

    if not self.setup_finished:
      raise RuntimeError("The setup has not finished. See `setup`.")
    return await func(*args, **kwargs)

  return wrapper  # type: ignore[return-value]


class NimServer:
  """Accepts players and pairs them up into games.

  Every connection gets its own `ViewProxy`. The first of every two connections starts a new
  session, the next one is added to it. If the waiting session ended before a second player came
  along (because the first player left), the next connection starts a fresh session instead.

  Example:
    >>> async with NimServer(port=0, piles=[3, 4, 5]) as server:
    ...   print(server.port)
    ...   await server.serve_forever()
  """

  def __init__(
    self,
    host: str = "localhost",
    port: int = 5678,
    piles: Optional[Sequence[int]] = None,
    verbose: bool = False,
  ):
    """
    Args:
      host: The interface to listen on.
      port: The port to listen on. 0 picks a free port, see `port`.
      piles: The starting piles of every game. Defaults to 3, 4, 5.
      verbose: Log game events at INFO instead of DEBUG.

    Raises:
      ValueError: if `piles` is not a valid starting position.
    """
    self.host = host
    self._requested_port = port
    self.piles: List[int] = validate_starting_piles(piles if piles is not None else [3, 4, 5])
    self.verbose = verbose

    self._server: Optional[asyncio.AbstractServer] = None
    self._stopped: Optional[asyncio.Event] = None
    self._waiting: Optional[NimModel] = None
    self._sessions: List[NimModel] = []
    self._connections: Set[ViewProxy] = set()
    self._handlers: Set[asyncio.Task] = set()

  @property
  def setup_finished(self) -> bool:
    return self._server is not None

  @property
  def port(self) -> int:
    """The port the server is bound to."""
    if self._server is None or not self._server.sockets:
      return self._requested_port
    return self._server.sockets[0].getsockname()[1]

  @property
  def sessions(self) -> List[NimModel]:
    """Sessions that are still being played or waiting for a second player."""
    return [s for s in self._sessions if not s.ended_by_quit]

  async def setup(self):
    """Start listening for players.

    Raises:
      OSError: if the address cannot be bound.
    """
    if self._server is not None:
      return
    self._stopped = asyncio.Event()
    self._server = await asyncio.start_server(
      self._handle_connection, self.host, self._requested_port
    )
    logger.info(
      "Nim server %s (wire protocol %s) listening on %s:%d, piles: %s",
      __version__,
      WIRE_PROTOCOL_VERSION,
      self.host,
      self.port,
      self.piles,
    )

  @need_setup_finished
  async def serve_forever(self):
    """Accept players until `stop` is called."""
    assert self._stopped is not None
    await self._stopped.wait()

  async def stop(self):
    """Stop accepting players and close every connection."""
    if self._server is None:
      return
    server, self._server = self._server, None
    server.close()
    for proxy in list(self._connections):
      await proxy.io.stop()
    if self._handlers:
      await asyncio.gather(*self._handlers, return_exceptions=True)
    await server.wait_closed()
    self._waiting = None
    if self._stopped is not None:
      self._stopped.set()
    logger.info("Nim server stopped")

  async def __aenter__(self):
    await self.setup()
    return self

  async def __aexit__(self, exc_type, exc_value, traceback):
    await self.stop()

  def _session_for_new_connection(self) -> NimModel:
    self._sessions = [s for s in self._sessions if not s.ended_by_quit]

    if self._waiting is None or self._waiting.finished:
      model = NimModel(self.piles, verbose=self.verbose)
      self._sessions.append(model)
      self._waiting = model
      logger.debug("New session, %d live", len(self._sessions))
      return model

    model, self._waiting = self._waiting, None
    return model

  async def _handle_connection(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
    io = Socket.from_streams(reader, writer)
    logger.info("Player connected from %s", io.peer)
    task = asyncio.current_task()
    assert task is not None
    self._handlers.add(task)

    proxy = ViewProxy(io)
    proxy.set_listener(self._session_for_new_connection())
    self._connections.add(proxy)
    try:
      await proxy.run()
    except Exception:  # pylint: disable=broad-except
      logger.exception("Error in connection with %s", io.peer)
    finally:
      self._connections.discard(proxy)
      self._handlers.discard(task)
      logger.info("Player at %s disconnected", io.peer)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
  parser = argparse.ArgumentParser(prog="nim-server", description="Host games of Nim.")
  parser.add_argument("host", nargs="?", default=CONFIG.network.host)
  parser.add_argument("port", nargs="?", type=int, default=CONFIG.network.port)
  parser.add_argument(
    "piles",
    nargs="*",
    type=int,
    help="starting size of each pile (default: %s)" % " ".join(map(str, CONFIG.game.piles)),
  )
  parser.add_argument(
    "-v", "--verbose", action="store_true", default=CONFIG.game.verbose, help="log game events"
  )
  parser.add_argument(
    "--version",
    action="version",
    version=f"%(prog)s {__version__} (wire protocol {WIRE_PROTOCOL_VERSION})",
  )
  return parser.parse_args(argv)


async def _serve(server: NimServer):
  async with server:
    await server.serve_forever()


def main(argv: Optional[Sequence[str]] = None):
  args = _parse_args(argv)

  add_console_handler(logging.INFO)

  try:
    server = NimServer(
      host=args.host, port=args.port, piles=args.piles or CONFIG.game.piles, verbose=args.verbose
    )
  except ValueError as e:
    print(f"nim-server: {e}", file=sys.stderr)
    sys.exit(2)

  try:
    asyncio.run(_serve(server))
  except OSError as e:
    print(f"nim-server: {e}", file=sys.stderr)
    sys.exit(1)
  except KeyboardInterrupt:
    pass


if __name__ == "__main__":
  main()
