"""
pyserial backed byte channel for the BNO055 UART interface.

`port` is anything `serial.serial_for_url` accepts: a device path such as
/dev/ttyUSB0 or COM3, or a pyserial URL such as loop://.
"""
from typing import Optional

import serial

from bno055d.common.swaglog import cloudlog
from bno055d.sensors.bno055_errors import TransportError, TransportTimeout

BAUD_RATE = 115200
DEFAULT_TIMEOUT = 1.0


class SerialTransport:
  def __init__(self, port: str, baudrate: int = BAUD_RATE, timeout: float = DEFAULT_TIMEOUT):
    self.port = port
    self.baudrate = baudrate
    self.timeout = timeout
    self._ser: Optional[serial.SerialBase] = None

  @property
  def is_open(self) -> bool:
    return self._ser is not None and self._ser.is_open

  def open(self) -> None:
    if self.is_open:
      return
    try:
      self._ser = serial.serial_for_url(
        self.port,
        baudrate=self.baudrate,
        bytesize=serial.EIGHTBITS,
        parity=serial.PARITY_NONE,
        stopbits=serial.STOPBITS_ONE,
        timeout=self.timeout,
        write_timeout=self.timeout,
      )
    except (serial.SerialException, ValueError) as e:
      raise TransportError(f"Failed to open {self.port}: {e}") from e
    cloudlog.info(f"Opened {self.port} at {self.baudrate} baud")

  def close(self) -> None:
    if self._ser is not None:
      try:
        self._ser.close()
      except serial.SerialException:
        cloudlog.exception(f"Error closing {self.port}")
      self._ser = None

  def set_timeout(self, seconds: float) -> None:
    self.timeout = seconds
    if self._ser is not None:
      self._ser.timeout = seconds
      self._ser.write_timeout = seconds

  def reset_input_buffer(self) -> None:
    try:
      self._port().reset_input_buffer()
    except serial.SerialException as e:
      raise TransportError(f"Flushing {self.port} failed: {e}") from e

  def write(self, data: bytes) -> None:
    try:
      self._port().write(data)
    except serial.SerialTimeoutException as e:
      raise TransportTimeout(f"Write to {self.port} timed out") from e
    except serial.SerialException as e:
      raise TransportError(f"Write to {self.port} failed: {e}") from e

  def read(self, size: int) -> bytes:
    """Read exactly `size` bytes or raise TransportTimeout."""
    try:
      data = self._port().read(size)
    except serial.SerialException as e:
      raise TransportError(f"Read from {self.port} failed: {e}") from e
    if len(data) < size:
      raise TransportTimeout(f"Read from {self.port} timed out ({len(data)}/{size} bytes)")
    return data

  def _port(self) -> serial.SerialBase:
    if not self.is_open:
      raise TransportError(f"{self.port} is not open")
    return self._ser
