"""
BNO055 9-DOF orientation sensor over the UART register protocol.

The sensor runs its own fusion in NDOF mode; this class brings it from
power-on to NDOF and reads the fused quaternion and calibration status.
"""
import threading
import time
from enum import Enum
from typing import Callable, Optional

from bno055d.common.swaglog import cloudlog
from bno055d.sensors.bno055_decoder import (
  QUATERNION_DATA_SIZE, CalibrationStatus, OrientationSample, SensorValues,
  decode_calibration, decode_quaternion, decode_temperature,
)
from bno055d.sensors.bno055_errors import (
  BNO055Error, BootstrapError, DeviceSystemError, NotInitialized, SelfTestFailed, TransportError,
)
from bno055d.sensors.bno055_registers import (
  SELF_TEST_ALL_PASSED, SYS_TRIGGER_RESET, SYS_TRIGGER_SELF_TEST, UNIT_SELECTION,
  OperatingMode, PowerMode, RegisterAddress, SystemErrorCode,
)
from bno055d.sensors.connection_health import HealthMonitor
from bno055d.sensors.retry_controller import DEFAULT_RETRY_MAX, RetryController
from bno055d.sensors.serial_transport import SerialTransport

# Register commits and power rail changes need time to settle
SETTLE_DELAY = 0.3

BOOTSTRAP_TIMEOUT = 1.0
OPERATING_TIMEOUT = 0.03


class BootstrapState(Enum):
  UNOPENED = 0
  CONFIG_MODE = 1
  POWER_CONFIGURED = 2
  PAGE_SELECTED = 3
  UNITS_SELECTED = 4
  SELF_TESTED = 5
  ERROR_CHECKED = 6
  OPERATIONAL = 7


class BNO055:
  """
  One BNO055 behind one serial transport.

  All register traffic goes through a single lock: the protocol has no
  request ids, so only one request may be in flight on the transport.
  Call bootstrap() before any other command.
  """

  def __init__(self, retries: int = DEFAULT_RETRY_MAX,
               transport_factory: Callable[[str], object] = SerialTransport,
               sleep: Callable[[float], None] = time.sleep):
    self.retry_max = retries
    self._transport_factory = transport_factory
    self._sleep = sleep
    self._lock = threading.Lock()
    self._transport = None
    self._link: Optional[RetryController] = None
    self._health = HealthMonitor()
    self._values = SensorValues()
    self._initialized = False
    self.bootstrap_state = BootstrapState.UNOPENED

  @property
  def initialized(self) -> bool:
    return self._initialized

  @property
  def position(self) -> OrientationSample:
    """Quaternion from the last refresh_position() call."""
    return self._values.position

  @property
  def calibration(self) -> CalibrationStatus:
    """Calibration status from the last refresh_calibration() call."""
    return self._values.calibration

  @property
  def connection_health(self) -> float:
    """100 minus packet loss (percentage of timed out requests). 100 means no dropped requests."""
    return self._health.connection_health()

  @property
  def health(self) -> HealthMonitor:
    return self._health

  def bootstrap(self, port: str) -> None:
    """
    Open `port` and configure the sensor for NDOF fusion output.

    Raises:
      BootstrapError: naming the last state reached; `cause` holds the
        underlying SelfTestFailed, DeviceSystemError, FrameError or
        TransportError.
    """
    with self._lock:
      self._initialized = False
      self._close_transport()
      self.bootstrap_state = BootstrapState.UNOPENED

      steps = [
        (BootstrapState.CONFIG_MODE, lambda: self._open_config_mode(port)),
        (BootstrapState.POWER_CONFIGURED, lambda: self._write_byte(RegisterAddress.PWR_MODE, PowerMode.NORMAL)),
        (BootstrapState.PAGE_SELECTED, lambda: self._write_byte(RegisterAddress.PAGE_ID, 0)),
        (BootstrapState.UNITS_SELECTED, lambda: self._write_byte(RegisterAddress.UNIT_SEL, UNIT_SELECTION)),
        (BootstrapState.SELF_TESTED, self._check_self_test),
        (BootstrapState.ERROR_CHECKED, self._check_system_error),
        (BootstrapState.OPERATIONAL, self._enter_fusion_mode),
      ]

      for next_state, step in steps:
        try:
          step()
        except BNO055Error as e:
          cloudlog.error(f"BNO055 bootstrap failed in state {self.bootstrap_state.name}: {e}")
          self._close_transport()
          raise BootstrapError(self.bootstrap_state, e) from e
        self._sleep(SETTLE_DELAY)
        self.bootstrap_state = next_state
        cloudlog.info(f"BNO055 bootstrap: {next_state.name}")

      self._initialized = True

  def shutdown(self) -> None:
    """Close the transport. Commands raise TransportError until the next bootstrap()."""
    with self._lock:
      self._close_transport()
    cloudlog.info("BNO055 sensor shutdown")

  def get_mode(self) -> OperatingMode:
    with self._lock:
      self._check_initialized()
      # Bits 4-7 of OPR_MODE are reserved
      code = self._read_byte(RegisterAddress.OPR_MODE) & 0x0F
      try:
        return OperatingMode(code)
      except ValueError as e:
        raise BNO055Error(f"Unknown operating mode 0x{code:02x}") from e

  def reset(self) -> None:
    """Trigger a device reset. The sensor does not acknowledge this write."""
    with self._lock:
      self._check_initialized()
      self._require_link().attempt_write(RegisterAddress.SYS_TRIGGER, bytes([SYS_TRIGGER_RESET]), ack_required=False)

  def self_test(self) -> int:
    """
    Run the built-in self test.

    Returns:
      SELFTEST_RESULT byte, 0x0F when all pass.
      Bit 0 = accelerometer, bit 1 = magnetometer, bit 2 = gyroscope, bit 3 = MCU.
    """
    with self._lock:
      self._check_initialized()
      return self._self_test()

  def get_temperature(self) -> int:
    """Package temperature in degrees Celsius. Available before bootstrap completes."""
    with self._lock:
      return decode_temperature(self._read_byte(RegisterAddress.TEMP))

  def get_system_error(self) -> int:
    with self._lock:
      self._check_initialized()
      return self._read_byte(RegisterAddress.SYS_ERR)

  def refresh_position(self) -> OrientationSample:
    with self._lock:
      self._check_initialized()
      data = self._require_link().attempt_read(RegisterAddress.QUATERNION_DATA_W_LSB, QUATERNION_DATA_SIZE)
      self._values.position = decode_quaternion(data)
      return self._values.position

  def refresh_calibration(self) -> CalibrationStatus:
    with self._lock:
      self._check_initialized()
      self._values.calibration = decode_calibration(self._read_byte(RegisterAddress.CALIB_STAT))
      return self._values.calibration

  # Bootstrap steps, called with the lock held

  def _open_config_mode(self, port: str) -> None:
    self._transport = self._transport_factory(port)
    self._transport.open()
    self._transport.set_timeout(BOOTSTRAP_TIMEOUT)
    self._link = RetryController(self._transport, self._health, self.retry_max)
    self._sleep(SETTLE_DELAY)
    self._write_byte(RegisterAddress.OPR_MODE, OperatingMode.CONFIG)

  def _check_self_test(self) -> None:
    result = self._self_test()
    if result != SELF_TEST_ALL_PASSED:
      raise SelfTestFailed(result)

  def _check_system_error(self) -> None:
    code = self._read_byte(RegisterAddress.SYS_ERR)
    if code != SystemErrorCode.NO_ERROR:
      raise DeviceSystemError(code)

  def _enter_fusion_mode(self) -> None:
    self._write_byte(RegisterAddress.OPR_MODE, OperatingMode.NDOF)
    self._transport.set_timeout(OPERATING_TIMEOUT)

  # Register helpers

  def _self_test(self) -> int:
    self._write_byte(RegisterAddress.SYS_TRIGGER, SYS_TRIGGER_SELF_TEST)
    return self._read_byte(RegisterAddress.SELFTEST_RESULT)

  def _read_byte(self, register: RegisterAddress) -> int:
    return self._require_link().attempt_read(register, 1)[0]

  def _write_byte(self, register: RegisterAddress, value: int) -> None:
    self._require_link().attempt_write(register, bytes([value]))

  def _require_link(self) -> RetryController:
    if self._link is None:
      raise TransportError("Transport is not open, call bootstrap() first")
    return self._link

  def _check_initialized(self) -> None:
    if not self._initialized:
      raise NotInitialized()

  def _close_transport(self) -> None:
    self._link = None
    if self._transport is not None:
      self._transport.close()
      self._transport = None
