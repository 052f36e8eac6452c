"""
Bounded retry around a single register read or write.

Every logical call counts as one packet. Each attempt flushes stale inbound
bytes, sends the frame and reads the fixed-size response. Transport timeouts
are retried up to `retry_max` times; a malformed response is raised at once.
"""
from bno055d.common.swaglog import cloudlog
from bno055d.sensors import frame_codec
from bno055d.sensors.bno055_errors import TransportTimeout
from bno055d.sensors.bno055_registers import RegisterAddress
from bno055d.sensors.connection_health import HealthMonitor

DEFAULT_RETRY_MAX = 5


class RetryController:
  def __init__(self, transport, health: HealthMonitor, retry_max: int = DEFAULT_RETRY_MAX):
    if retry_max < 0:
      raise ValueError(f"retry_max must be >= 0, got {retry_max}")
    self.transport = transport
    self.health = health
    self.retry_max = retry_max

  def attempt_read(self, register: RegisterAddress, length: int) -> bytes:
    frame = frame_codec.encode_read(register, length)
    response = self._exchange(frame, frame_codec.read_response_size(length))
    return frame_codec.validate_read_response(response, length)

  def attempt_write(self, register: RegisterAddress, payload: bytes, ack_required: bool = True) -> None:
    frame = frame_codec.encode_write(register, payload)
    if not ack_required:
      self._exchange(frame, 0)
      return
    response = self._exchange(frame, frame_codec.WRITE_ACK_SIZE)
    frame_codec.validate_write_ack(response)

  def _exchange(self, frame: bytes, response_size: int) -> bytes:
    self.health.record_attempt()

    retries = 0
    while True:
      try:
        self.transport.reset_input_buffer()
        self.transport.write(frame)
        if response_size == 0:
          return b""
        return self.transport.read(response_size)
      except TransportTimeout as e:
        self.health.record_timeout()
        if retries >= self.retry_max:
          cloudlog.warning(f"Request {frame[:frame_codec.HEADER_SIZE].hex(' ')} timed out after {retries + 1} attempts")
          raise TransportTimeout(f"Retries exceeded, request timed out after {retries + 1} attempts") from e
        retries += 1
        cloudlog.debug(f"Request {frame[:frame_codec.HEADER_SIZE].hex(' ')} timed out, retry {retries}/{self.retry_max}")
