import argparse
import asyncio
import logging
import sys
import threading
from typing import Callable, List, Optional, Sequence

from pynim import CONFIG, __version__, add_console_handler
from pynim.game.listener import ModelListener, ViewListener
from pynim.io.errors import TransportError
from pynim.protocol import FieldRangeError
from pynim.proxies import ModelProxy

logger = logging.getLogger(__name__)

PROMPT = "Your turn > "

HELP_MSG = """Command  Example/Description
q        quit the game
n        request new restarted game
p# i# q# remove q# pins starting at index i# from pile p#
Commands use 0-based indexing."""


class NimView(ModelListener):
  """Text interface for one player.

  Events are printed to stdout. When it is this player's turn, commands are read from the console
  on a separate thread, so notifications from the server (like the other player quitting) are
  still handled while waiting for input.
  """

  def __init__(self, input_func: Callable[[str], str] = input):
    """
    Args:
      input_func: Reads one line of input after showing a prompt. Called on a worker thread.
    """
    self._input = input_func
    self._listener: Optional[ViewListener] = None
    self._prompt_task: Optional[asyncio.Task] = None
    self._done = asyncio.Event()
    self.piles: List[int] = []

  @property
  def listener(self) -> ViewListener:
    assert self._listener is not None, "forgot to call set_listener?"
    return self._listener

  def set_listener(self, listener: ViewListener) -> None:
    self._listener = listener

  @property
  def done(self) -> bool:
    return self._done.is_set()

  async def wait_done(self) -> None:
    """Wait until the session has ended."""
    await self._done.wait()

  def _print_piles(self):
    print("Piles: " + " ".join(str(p) for p in self.piles))

  def _read_line(self) -> "asyncio.Future[str]":
    loop = asyncio.get_running_loop()
    future: "asyncio.Future[str]" = loop.create_future()

    def deliver(result: Optional[str], error: Optional[Exception]):
      if future.done():
        return
      if error is not None:
        future.set_exception(error)
      else:
        future.set_result(result)

    def read():
      try:
        line: Optional[str] = self._input(PROMPT)
        error: Optional[Exception] = None
      except Exception as e:  # pylint: disable=broad-except
        line, error = None, e
      try:
        loop.call_soon_threadsafe(deliver, line, error)
      except RuntimeError:
        pass  # loop closed, nobody is waiting anymore

    # daemon: a pending input() must not keep the process alive
    threading.Thread(target=read, name="nim-input", daemon=True).start()
    return future

  async def _prompt(self):
    while True:
      try:
        line = await self._read_line()
      except EOFError:
        line = "q"

      command = line.strip()
      if command.lower() in ("h", "help"):
        print(HELP_MSG)
        continue

      try:
        if command.lower() == "q":
          await self.listener.quit(self)
        elif command == "n":
          await self.listener.new_game(self)
        else:
          try:
            pile, start, amount = (int(arg) for arg in command.split())
          except ValueError:
            print("Type h for help.")
            continue
          try:
            await self.listener.move_request(self, pile, start, amount)
          except FieldRangeError as e:
            print(f"Invalid move: {e}")
            continue
      except TransportError as e:
        logger.error("Lost connection to the server: %s", e)
        await self.quit()
      return

  async def quit(self) -> None:
    if self._prompt_task is not None and not self._prompt_task.done():
      if self._prompt_task is not asyncio.current_task():
        self._prompt_task.cancel()
    if self._done.is_set():
      return
    print("quitting")
    self._done.set()

  async def move_made(self, piles: Sequence[int]) -> None:
    self.piles = list(piles)
    self._print_piles()

  async def waiting_for_other_player(self) -> None:
    print("Waiting for an opponent...")

  async def my_turn(self) -> None:
    if self._prompt_task is not None and not self._prompt_task.done():
      return
    self._prompt_task = asyncio.create_task(self._prompt())

  async def other_turn(self, name: str) -> None:
    print(f"{name} planning move.")

  async def you_won(self) -> None:
    print("You win!")
    try:
      await self.listener.quit(self)
    except TransportError as e:
      logger.warning("Could not tell the server we are leaving: %s", e)

  async def other_win(self, name: str) -> None:
    print(f"{name} wins!")

  async def new_game(self, piles: Sequence[int]) -> None:
    self.piles = list(piles)
    print("new game started.")
    self._print_piles()


async def play(host: str, port: int, name: str, input_func: Callable[[str], str] = input):
  """Connect to a server, join as `name` and play until the session ends.

  Raises:
    TransportError: if the server cannot be reached.
  """
  proxy = await ModelProxy.connect(host, port)
  view = NimView(input_func=input_func)
  proxy.set_listener(view)
  view.set_listener(proxy)
  proxy.start()
  try:
    await proxy.join(view, name)
    await view.wait_done()
  finally:
    await proxy.stop()


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
  parser = argparse.ArgumentParser(prog="nim", description="Play Nim against another player.")
  parser.add_argument("host", nargs="?", default=CONFIG.network.host)
  parser.add_argument("port", nargs="?", type=int, default=CONFIG.network.port)
  parser.add_argument("name")
  parser.add_argument("--version", action="version", version=__version__)
  return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None):
  args = _parse_args(argv)
  add_console_handler(logging.WARNING)
  try:
    asyncio.run(play(args.host, args.port, args.name))
  except TransportError as e:
    print(f"nim: {e}", file=sys.stderr)
    sys.exit(1)
  except KeyboardInterrupt:
    pass


if __name__ == "__main__":
  main()
