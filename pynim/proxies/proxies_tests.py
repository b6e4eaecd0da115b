import asyncio
import unittest
import unittest.mock

from pynim.game import ModelListener, NimModel, ViewListener
from pynim.io.errors import TransportError
from pynim.io.mock_tests import MockIO
from pynim.protocol import (
  Join,
  MoveMade,
  MoveRequest,
  MyTurn,
  NewGame,
  NewGameRequest,
  OtherTurn,
  OtherWin,
  Quit,
  QuitRequest,
  WaitingForOtherPlayer,
  YouWon,
  encode,
)
from pynim.proxies import ModelProxy, ViewProxy


async def settle():
  for _ in range(10):
    await asyncio.sleep(0)


class ModelProxyTests(unittest.IsolatedAsyncioTestCase):
  """Client side: requests out, notifications in."""

  async def asyncSetUp(self):
    self.view = unittest.mock.MagicMock(spec=ModelListener)

  async def test_requests_are_encoded(self):
    io = MockIO()
    proxy = ModelProxy(io)
    await proxy.join(self.view, "Ann")
    await proxy.move_request(self.view, 2, 0, 1)
    await proxy.new_game(self.view)
    await proxy.quit(self.view)
    self.assertEqual(io.written_data, [b"J\x00\x03Ann", b"M\x02\x00\x01", b"N", b"Q"])

  async def test_request_write_failure_raises(self):
    io = MockIO()
    io.fail_writes = True
    proxy = ModelProxy(io)
    with self.assertRaises(TransportError):
      await proxy.join(self.view, "Ann")

  async def test_notifications_are_dispatched_in_order(self):
    stream = b"".join(
      encode(m)
      for m in [
        WaitingForOtherPlayer(),
        NewGame([3, 4, 5]),
        MyTurn(),
        MoveMade([4, 5]),
        OtherTurn("Bob"),
        OtherWin("Bob"),
        YouWon(),
      ]
    )
    io = MockIO(stream)
    proxy = ModelProxy(io)
    proxy.set_listener(self.view)
    await proxy.run()

    self.assertEqual(
      self.view.method_calls,
      [
        unittest.mock.call.waiting_for_other_player(),
        unittest.mock.call.new_game((3, 4, 5)),
        unittest.mock.call.my_turn(),
        unittest.mock.call.move_made((4, 5)),
        unittest.mock.call.other_turn("Bob"),
        unittest.mock.call.other_win("Bob"),
        unittest.mock.call.you_won(),
        unittest.mock.call.quit(),
      ],
    )
    self.assertEqual(io.stop_calls, 1)
    self.assertFalse(proxy.running)

  async def test_quit_then_close_delivers_one_quit(self):
    proxy = ModelProxy(MockIO(encode(Quit())))
    proxy.set_listener(self.view)
    await proxy.run()
    self.view.quit.assert_awaited_once()

  async def test_unknown_opcode_closes_connection(self):
    io = MockIO(encode(MyTurn()) + b"J\x00\x00" + encode(YouWon()))
    proxy = ModelProxy(io)
    proxy.set_listener(self.view)
    await proxy.run()
    self.view.my_turn.assert_awaited_once()
    self.view.you_won.assert_not_awaited()
    self.view.quit.assert_awaited_once()
    self.assertEqual(io.stop_calls, 1)

  async def test_truncated_message_is_a_quit(self):
    proxy = ModelProxy(MockIO(b"M\x03\x01"))
    proxy.set_listener(self.view)
    await proxy.run()
    self.view.move_made.assert_not_awaited()
    self.view.quit.assert_awaited_once()

  async def test_run_requires_listener(self):
    with self.assertRaises(RuntimeError):
      await ModelProxy(MockIO()).run()

  async def test_stop_ends_dispatch_loop(self):
    io = MockIO(hold_open=True)
    proxy = ModelProxy(io)
    proxy.set_listener(self.view)
    proxy.start()
    await settle()
    self.assertTrue(proxy.running)
    await proxy.stop()
    self.assertFalse(proxy.running)
    self.view.quit.assert_awaited_once()


class ViewProxyTests(unittest.IsolatedAsyncioTestCase):
  """Server side: requests in, notifications out."""

  async def asyncSetUp(self):
    self.model = unittest.mock.MagicMock(spec=ViewListener)

  async def test_requests_name_the_proxy(self):
    stream = b"".join(
      encode(m) for m in [Join("Ann"), MoveRequest(1, 2, 3), NewGameRequest(), QuitRequest()]
    )
    proxy = ViewProxy(MockIO(stream))
    proxy.set_listener(self.model)
    await proxy.run()
    self.assertEqual(
      self.model.method_calls,
      [
        unittest.mock.call.join(proxy, "Ann"),
        unittest.mock.call.move_request(proxy, 1, 2, 3),
        unittest.mock.call.new_game(proxy),
        unittest.mock.call.quit(proxy),
      ],
    )

  async def test_disconnect_is_a_quit(self):
    proxy = ViewProxy(MockIO(encode(Join("Ann"))))
    proxy.set_listener(self.model)
    await proxy.run()
    self.model.quit.assert_awaited_once_with(proxy)

  async def test_notification_opcode_from_client_closes_connection(self):
    io = MockIO(b"T")
    proxy = ViewProxy(io)
    proxy.set_listener(self.model)
    await proxy.run()
    self.model.quit.assert_awaited_once_with(proxy)
    self.assertEqual(io.stop_calls, 1)

  async def test_notifications_are_encoded(self):
    io = MockIO()
    proxy = ViewProxy(io)
    await proxy.waiting_for_other_player()
    await proxy.new_game([3, 4, 5])
    await proxy.other_turn("Bob")
    await proxy.move_made([1])
    await proxy.quit()
    self.assertEqual(io.written, b"PN\x03\x03\x04\x05U\x00\x03BobM\x01\x01Q")

  async def test_write_failure_closes_connection_without_raising(self):
    io = MockIO()
    io.fail_writes = True
    proxy = ViewProxy(io)
    await proxy.my_turn()
    self.assertEqual(io.stop_calls, 1)
    io.fail_writes = False
    await proxy.my_turn()
    self.assertEqual(io.written, b"")


class ProxyAndModelTests(unittest.IsolatedAsyncioTestCase):
  async def test_session_over_mock_connections(self):
    model = NimModel([3, 4, 5])
    io_a = MockIO(encode(Join("A")), hold_open=True)
    a = ViewProxy(io_a)
    a.set_listener(model)
    a.start()
    await settle()
    self.assertEqual(io_a.written, b"P")

    io_b = MockIO(encode(Join("B")) + encode(QuitRequest()))
    b = ViewProxy(io_b)
    b.set_listener(model)
    await b.run()

    io_a.feed_eof()
    await a.wait_closed()

    self.assertEqual(io_a.written, b"P" + b"N\x03\x03\x04\x05" + b"T" + b"Q")
    self.assertEqual(io_b.written, b"N\x03\x03\x04\x05" + b"U\x00\x01A" + b"Q")
    self.assertTrue(model.ended_by_quit)

  async def test_broken_player_does_not_stop_notifications_to_the_other(self):
    model = NimModel([3])
    io_a, io_b = MockIO(hold_open=True), MockIO(hold_open=True)
    a, b = ViewProxy(io_a), ViewProxy(io_b)
    await model.join(a, "A")
    io_a.fail_writes = True
    await model.join(b, "B")
    self.assertEqual(io_b.written, b"N\x01\x03U\x00\x01A")
    self.assertEqual(io_a.stop_calls, 1)
