from .codec import decode, encode
from .errors import (
  FieldRangeError,
  MalformedMessageError,
  ProtocolError,
  TruncatedMessageError,
  UnknownOpcodeError,
)
from .messages import (
  NOTIFICATIONS,
  REQUESTS,
  Join,
  Message,
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
)
from .opcodes import Direction, NotificationOpcode, RequestOpcode
