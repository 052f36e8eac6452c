"""
Frame codec for the BNO055 UART register protocol.

Request frames start with a 4-byte header:
  0xAA, direction (0x01 read / 0x00 write), register, length
followed by the payload on writes. The sensor answers a read with
  0xBB, length, payload...
and a write with the two byte acknowledgement
  0xEE, 0x01
"""
from bno055d.sensors.bno055_errors import FrameError, FrameErrorKind
from bno055d.sensors.bno055_registers import RegisterAddress

START_BYTE = 0xAA
READ = 0x01
WRITE = 0x00

READ_RESPONSE = 0xBB
WRITE_RESPONSE = 0xEE
WRITE_SUCCESS = 0x01

HEADER_SIZE = 4
READ_RESPONSE_HEADER_SIZE = 2
WRITE_ACK_SIZE = 2

MAX_LENGTH = 0xFF


def _register_byte(register: RegisterAddress) -> int:
  if not isinstance(register, RegisterAddress):
    raise TypeError(f"register must be a RegisterAddress, got {register!r}")
  return int(register)


def encode_read(register: RegisterAddress, length: int) -> bytes:
  if not 1 <= length <= MAX_LENGTH:
    raise ValueError(f"read length must be in [1, {MAX_LENGTH}], got {length}")
  return bytes([START_BYTE, READ, _register_byte(register), length])


def encode_write(register: RegisterAddress, payload: bytes) -> bytes:
  payload = bytes(payload)
  if len(payload) > MAX_LENGTH:
    raise ValueError(f"write payload must be at most {MAX_LENGTH} bytes, got {len(payload)}")
  return bytes([START_BYTE, WRITE, _register_byte(register), len(payload)]) + payload


def read_response_size(length: int) -> int:
  return length + READ_RESPONSE_HEADER_SIZE


def validate_read_response(buffer: bytes, expected_length: int) -> bytes:
  """Check a read response and return its payload. Byte 1 (length echo) is not checked."""
  if len(buffer) == 0 or buffer[0] != READ_RESPONSE:
    raise FrameError(FrameErrorKind.HEADER_MISMATCH, buffer, f"expected 0x{READ_RESPONSE:02x} at byte 0")
  if len(buffer) < read_response_size(expected_length):
    raise FrameError(FrameErrorKind.SHORT_FRAME, buffer, f"expected {read_response_size(expected_length)} bytes")
  return bytes(buffer[READ_RESPONSE_HEADER_SIZE:READ_RESPONSE_HEADER_SIZE + expected_length])


def validate_write_ack(buffer: bytes) -> None:
  # Either byte being wrong rejects the ack
  if len(buffer) < WRITE_ACK_SIZE:
    raise FrameError(FrameErrorKind.SHORT_FRAME, buffer, f"expected {WRITE_ACK_SIZE} bytes")
  if buffer[0] != WRITE_RESPONSE or buffer[1] != WRITE_SUCCESS:
    raise FrameError(FrameErrorKind.HEADER_MISMATCH, buffer,
                     f"expected 0x{WRITE_RESPONSE:02x} 0x{WRITE_SUCCESS:02x}")
