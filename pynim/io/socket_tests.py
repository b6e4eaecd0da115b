import asyncio
import socket
import unittest

from pynim.io.errors import EndOfStream, TransportError
from pynim.io.socket import Socket


class SocketTests(unittest.IsolatedAsyncioTestCase):
  async def asyncSetUp(self):
    self.received = asyncio.Queue()

    async def echo_once(reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
      data = await reader.read(100)
      self.received.put_nowait(data)
      writer.write(data[:3])
      await writer.drain()
      writer.close()

    self.server = await asyncio.start_server(echo_once, "127.0.0.1", 0)
    self.port = self.server.sockets[0].getsockname()[1]

  async def asyncTearDown(self):
    self.server.close()
    await self.server.wait_closed()

  async def test_write_read_and_end_of_stream(self):
    io = Socket("127.0.0.1", self.port)
    await io.setup()
    await io.write(b"hello")
    self.assertEqual(await asyncio.wait_for(self.received.get(), timeout=5), b"hello")
    self.assertEqual(await io.read(2), b"he")
    with self.assertRaises(EndOfStream) as ctx:
      await io.read(2)
    self.assertEqual(ctx.exception.partial, b"l")
    await io.stop()
    await io.stop()
    self.assertTrue(io.closed)

  async def test_write_after_stop(self):
    io = Socket("127.0.0.1", self.port)
    await io.setup()
    await io.stop()
    with self.assertRaises(TransportError) as ctx:
      await io.write(b"x")
    self.assertEqual(ctx.exception.operation, "write")

  async def test_connection_refused(self):
    with socket.socket() as s:
      s.bind(("127.0.0.1", 0))
      port = s.getsockname()[1]
    io = Socket("127.0.0.1", port)
    with self.assertRaises(TransportError) as ctx:
      await io.setup()
    self.assertEqual(ctx.exception.operation, "connect")
    self.assertIsInstance(ctx.exception.original_error, OSError)

