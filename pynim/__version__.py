"""Version numbers of the package and of the wire protocol."""

import os

with open(os.path.join(os.path.dirname(__file__), "version.txt"), "r", encoding="utf-8") as f:
  __version__ = f.read().strip()

# Version of the byte layout documented in pynim.protocol.messages. Not sent on the wire.
WIRE_PROTOCOL_VERSION = "1.0"
