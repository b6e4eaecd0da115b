from .binary import Reader, Writer
from .errors import EndOfStream, TransportError
from .io import LOG_LEVEL_IO, IOBase
from .socket import Socket
