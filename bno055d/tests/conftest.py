import pytest

from bno055d.sensors.bno055 import BNO055
from bno055d.sensors.bno055_errors import TransportTimeout
from bno055d.sensors.bno055_registers import RegisterAddress, SYS_TRIGGER_RESET


class FakeBNO055:
  """
  In-memory BNO055 speaking the UART register protocol.

  Knobs:
    drop_responses: number of upcoming requests that get no answer
    always_timeout: never answer
    read_header / ack: bytes used to build responses
  """

  def __init__(self):
    self.registers = bytearray(0x80)
    self.registers[RegisterAddress.SELFTEST_RESULT] = 0x0F
    self.is_open = False
    self.open_count = 0
    self.timeout = None
    self.sent: list[bytes] = []
    self.writes: list[tuple[int, bytes]] = []
    self.drop_responses = 0
    self.always_timeout = False
    self.read_header = 0xBB
    self.ack = bytes([0xEE, 0x01])
    self._pending = b""

  def __call__(self, port: str) -> "FakeBNO055":
    self.port = port
    return self

  def open(self) -> None:
    self.is_open = True
    self.open_count += 1

  def close(self) -> None:
    self.is_open = False

  def set_timeout(self, seconds: float) -> None:
    self.timeout = seconds

  def reset_input_buffer(self) -> None:
    self._pending = b""

  def write(self, data: bytes) -> None:
    assert self.is_open
    data = bytes(data)
    self.sent.append(data)
    if self.always_timeout:
      return
    if self.drop_responses > 0:
      self.drop_responses -= 1
      return

    assert data[0] == 0xAA
    register, length = data[2], data[3]
    if data[1] == 0x01:
      payload = bytes(self.registers[register:register + length])
      self._pending = bytes([self.read_header, length]) + payload
    else:
      payload = data[4:4 + length]
      self.writes.append((register, payload))
      self.registers[register:register + length] = payload
      if register == RegisterAddress.SYS_TRIGGER and payload == bytes([SYS_TRIGGER_RESET]):
        return
      self._pending = self.ack

  def read(self, size: int) -> bytes:
    if len(self._pending) < size:
      raise TransportTimeout("fake read timed out")
    data, self._pending = self._pending[:size], self._pending[size:]
    return data


@pytest.fixture
def fake_sensor_factory():
  return FakeBNO055


@pytest.fixture
def fake_sensor() -> FakeBNO055:
  return FakeBNO055()


@pytest.fixture
def sleeps() -> list[float]:
  return []


@pytest.fixture
def device(fake_sensor, sleeps) -> BNO055:
  return BNO055(retries=5, transport_factory=fake_sensor, sleep=sleeps.append)
