"""Exceptions raised by the BNO055 register protocol and device controller."""
from enum import Enum
from typing import Optional

from bno055d.sensors.bno055_registers import describe_system_error


class BNO055Error(Exception):
  pass


class TransportError(BNO055Error):
  """The byte channel could not be opened or is not open."""


class TransportTimeout(TransportError):
  """A read or write did not complete within the transport timeout."""


class FrameErrorKind(Enum):
  HEADER_MISMATCH = "header mismatch"
  SHORT_FRAME = "short frame"


class FrameError(BNO055Error):
  def __init__(self, kind: FrameErrorKind, frame: bytes, detail: str = ""):
    self.kind = kind
    self.frame = bytes(frame)
    message = f"{kind.value}: {self.frame.hex(' ') or '<empty>'}"
    if detail:
      message += f" ({detail})"
    super().__init__(message)


class SelfTestFailed(BNO055Error):
  def __init__(self, code: int):
    self.code = code
    super().__init__(f"Self test failed: 0x{code:02x}")


class DeviceSystemError(BNO055Error):
  def __init__(self, code: int):
    self.code = code
    super().__init__(f"System error 0x{code:02x}: {describe_system_error(code)}")


class NotInitialized(BNO055Error):
  def __init__(self):
    super().__init__("Device has not been initialized, call bootstrap() first")


class BootstrapError(BNO055Error):
  """Bootstrap aborted. `state` is the last state reached, `cause` the error that stopped it."""

  def __init__(self, state, cause: Optional[BaseException]):
    self.state = state
    self.cause = cause
    super().__init__(f"Bootstrap failed in state {state.name}: {cause}")
