"""Exceptions raised by pynim IO objects."""

from __future__ import annotations


class EndOfStream(Exception):
  """The peer closed the stream.

  Attributes:
    expected: The number of bytes the reader was waiting for.
    partial: The bytes that did arrive before the stream ended.
  """

  def __init__(self, expected: int, partial: bytes = b"") -> None:
    super().__init__(f"Stream ended after {len(partial)} of {expected} bytes")
    self.expected = expected
    self.partial = partial


class TransportError(Exception):
  """Exception raised when reading from or writing to a connection fails.

  Attributes:
    operation: The operation that failed (e.g., "write", "read", "connect").
    original_error: The underlying exception that caused this error.
  """

  def __init__(
    self,
    message: str,
    operation: str = "",
    original_error: Exception | None = None,
  ) -> None:
    super().__init__(message)
    self.operation = operation
    self.original_error = original_error
