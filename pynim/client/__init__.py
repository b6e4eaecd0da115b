from .view import NimView, play
