from typing import List, Sequence

from pynim.game.listener import ModelListener


class ChatterboxView(ModelListener):
  """A player view that prints every event it receives and remembers the last known
  position. Useful for running a `NimModel` in process, e.g. in tests or demos."""

  def __init__(self, name: str = "chatterbox"):
    self.name = name
    self.piles: List[int] = []
    self.winner = None
    self.has_quit = False

  async def quit(self):
    print(f"[{self.name}] Session ended.")
    self.has_quit = True

  async def move_made(self, piles: Sequence[int]):
    self.piles = list(piles)
    print(f"[{self.name}] Move made, piles: {' '.join(str(p) for p in piles)}")

  async def waiting_for_other_player(self):
    print(f"[{self.name}] Waiting for another player.")

  async def my_turn(self):
    print(f"[{self.name}] My turn.")

  async def other_turn(self, name: str):
    print(f"[{self.name}] Turn of {name}.")

  async def you_won(self):
    self.winner = self.name
    print(f"[{self.name}] I won.")

  async def other_win(self, name: str):
    self.winner = name
    print(f"[{self.name}] {name} won.")

  async def new_game(self, piles: Sequence[int]):
    self.piles = list(piles)
    self.winner = None
    print(f"[{self.name}] New game, piles: {' '.join(str(p) for p in piles)}")
