import asyncio
import io
import socket
import unittest
from contextlib import redirect_stdout
from typing import Callable, Sequence, Tuple

from pynim import __version__
from pynim.__version__ import WIRE_PROTOCOL_VERSION
from pynim.game import ModelListener
from pynim.proxies import ModelProxy
from pynim.server import NimServer
from pynim.server.nim_server import main


class QueueView(ModelListener):
  """Puts every event in a queue so tests can wait for it."""

  def __init__(self):
    self.events: "asyncio.Queue[Tuple]" = asyncio.Queue()

  async def next(self) -> Tuple:
    return await asyncio.wait_for(self.events.get(), timeout=5)

  async def quit(self):
    self.events.put_nowait(("quit",))

  async def move_made(self, piles: Sequence[int]):
    self.events.put_nowait(("move_made", tuple(piles)))

  async def waiting_for_other_player(self):
    self.events.put_nowait(("waiting",))

  async def my_turn(self):
    self.events.put_nowait(("my_turn",))

  async def other_turn(self, name: str):
    self.events.put_nowait(("other_turn", name))

  async def you_won(self):
    self.events.put_nowait(("you_won",))

  async def other_win(self, name: str):
    self.events.put_nowait(("other_win", name))

  async def new_game(self, piles: Sequence[int]):
    self.events.put_nowait(("new_game", tuple(piles)))


async def wait_until(condition: Callable[[], bool], timeout: float = 5):
  async def poll():
    while not condition():
      await asyncio.sleep(0.01)

  await asyncio.wait_for(poll(), timeout=timeout)


class NimServerTestCase(unittest.IsolatedAsyncioTestCase):
  piles = [1, 2]

  async def asyncSetUp(self):
    self.server = NimServer(host="127.0.0.1", port=0, piles=self.piles)
    await self.server.setup()

  async def asyncTearDown(self):
    await self.server.stop()

  async def connect(self, name: str) -> Tuple[ModelProxy, QueueView]:
    proxy = await ModelProxy.connect("127.0.0.1", self.server.port)
    view = QueueView()
    proxy.set_listener(view)
    proxy.start()
    await proxy.join(view, name)
    self.addAsyncCleanup(proxy.stop)
    return proxy, view

  async def pair(self):
    a, view_a = await self.connect("A")
    self.assertEqual(await view_a.next(), ("waiting",))
    b, view_b = await self.connect("B")
    self.assertEqual(await view_a.next(), ("new_game", (1, 2)))
    self.assertEqual(await view_a.next(), ("my_turn",))
    self.assertEqual(await view_b.next(), ("new_game", (1, 2)))
    self.assertEqual(await view_b.next(), ("other_turn", "A"))
    return a, view_a, b, view_b


class GameTests(NimServerTestCase):
  async def test_full_game(self):
    a, view_a, b, view_b = await self.pair()

    await a.move_request(view_a, 1, 0, 2)
    self.assertEqual(await view_a.next(), ("move_made", (1,)))
    self.assertEqual(await view_a.next(), ("other_turn", "B"))
    self.assertEqual(await view_b.next(), ("move_made", (1,)))
    self.assertEqual(await view_b.next(), ("my_turn",))

    await b.move_request(view_b, 0, 0, 1)
    self.assertEqual(await view_a.next(), ("other_win", "B"))
    self.assertEqual(await view_b.next(), ("you_won",))

    await b.quit(view_b)
    self.assertEqual(await view_a.next(), ("quit",))
    self.assertEqual(await view_b.next(), ("quit",))

  async def test_invalid_move_reprompts(self):
    a, view_a, _, view_b = await self.pair()
    await a.move_request(view_a, 5, 0, 1)
    self.assertEqual(await view_a.next(), ("my_turn",))
    self.assertTrue(view_b.events.empty())

  async def test_new_game(self):
    a, view_a, b, view_b = await self.pair()
    await a.move_request(view_a, 0, 0, 1)
    for _ in range(2):
      await view_a.next()
      await view_b.next()
    await b.new_game(view_b)
    self.assertEqual(await view_a.next(), ("new_game", (1, 2)))
    self.assertEqual(await view_a.next(), ("my_turn",))


class ConnectionTests(NimServerTestCase):
  async def test_disconnect_ends_session_for_opponent(self):
    _, view_a, b, _ = await self.pair()
    await b.stop()
    self.assertEqual(await view_a.next(), ("quit",))
    await wait_until(lambda: not self.server.sessions)

  async def test_third_player_starts_new_session(self):
    await self.pair()
    _, view_c = await self.connect("C")
    self.assertEqual(await view_c.next(), ("waiting",))
    self.assertEqual(len(self.server.sessions), 2)

  async def test_waiting_player_leaving_starts_fresh_session(self):
    a, view_a = await self.connect("A")
    self.assertEqual(await view_a.next(), ("waiting",))
    await a.stop()
    await wait_until(lambda: not self.server.sessions)

    _, view_b = await self.connect("B")
    self.assertEqual(await view_b.next(), ("waiting",))

  async def test_join_after_paired_player_left_gets_quit(self):
    a, view_a = await self.connect("A")
    self.assertEqual(await view_a.next(), ("waiting",))

    b = await ModelProxy.connect("127.0.0.1", self.server.port)
    view_b = QueueView()
    b.set_listener(view_b)
    b.start()
    self.addAsyncCleanup(b.stop)
    await wait_until(lambda: len(self.server._connections) == 2)

    await a.stop()
    await wait_until(lambda: not self.server.sessions)
    await b.join(view_b, "B")
    self.assertEqual(await view_b.next(), ("quit",))

  async def test_garbage_from_client_does_not_stop_server(self):
    reader, writer = await asyncio.open_connection("127.0.0.1", self.server.port)
    writer.write(b"X")
    await writer.drain()
    self.assertEqual(await asyncio.wait_for(reader.read(), timeout=5), b"")
    writer.close()

    await self.pair()

  async def test_stop_closes_connections(self):
    _, view_a = await self.connect("A")
    self.assertEqual(await view_a.next(), ("waiting",))
    await self.server.stop()
    self.assertEqual(await view_a.next(), ("quit",))


class LifecycleTests(unittest.IsolatedAsyncioTestCase):
  async def test_serve_forever_requires_setup(self):
    with self.assertRaises(RuntimeError):
      await NimServer(port=0).serve_forever()

  async def test_serve_forever_returns_after_stop(self):
    async with NimServer(host="127.0.0.1", port=0) as server:
      self.assertNotEqual(server.port, 0)
      task = asyncio.create_task(server.serve_forever())
      await asyncio.sleep(0)
      await server.stop()
      await asyncio.wait_for(task, timeout=5)
    self.assertFalse(server.setup_finished)

  async def test_port_in_use(self):
    with socket.socket() as s:
      s.bind(("127.0.0.1", 0))
      s.listen()
      server = NimServer(host="127.0.0.1", port=s.getsockname()[1])
      with self.assertRaises(OSError):
        await server.setup()

  def test_invalid_piles(self):
    with self.assertRaises(ValueError):
      NimServer(piles=[0])
    with self.assertRaises(ValueError):
      NimServer(piles=[])


class StartupTests(unittest.TestCase):
  def test_created_outside_event_loop(self):
    server = NimServer(host="127.0.0.1", port=0)

    async def run():
      async with server:
        task = asyncio.create_task(server.serve_forever())
        await asyncio.sleep(0)
        await server.stop()
        await task

    asyncio.run(asyncio.wait_for(run(), timeout=5))

  def test_version_names_wire_protocol(self):
    out = io.StringIO()
    with redirect_stdout(out), self.assertRaises(SystemExit):
      main(["--version"])
    self.assertIn(__version__, out.getvalue())
    self.assertIn(f"wire protocol {WIRE_PROTOCOL_VERSION}", out.getvalue())
