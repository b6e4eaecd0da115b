from .chatterbox import ChatterboxView
from .listener import ModelListener, ViewListener
from .model import GameState, NimModel, Player
from .piles import (
  MAX_PILE_COUNT,
  MAX_PILE_SIZE,
  IllegalMoveError,
  MoveKind,
  apply_move,
  validate_starting_piles,
)
