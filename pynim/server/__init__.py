from .nim_server import NimServer
