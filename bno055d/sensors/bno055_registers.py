"""
BNO055 register map and enumerated register values.

Only the page 0 registers this driver touches are listed. Values follow the
Bosch BNO055 datasheet, section 4.3.
"""
from enum import IntEnum


class RegisterAddress(IntEnum):
  PAGE_ID = 0x07
  QUATERNION_DATA_W_LSB = 0x20
  TEMP = 0x34
  CALIB_STAT = 0x35
  SELFTEST_RESULT = 0x36
  SYS_ERR = 0x3A
  UNIT_SEL = 0x3B
  OPR_MODE = 0x3D
  PWR_MODE = 0x3E
  SYS_TRIGGER = 0x3F


class OperatingMode(IntEnum):
  CONFIG = 0x00
  ACC_ONLY = 0x01
  MAG_ONLY = 0x02
  GYRO_ONLY = 0x03
  ACC_MAG = 0x04
  ACC_GYRO = 0x05
  MAG_GYRO = 0x06
  AMG = 0x07
  IMU_PLUS = 0x08
  COMPASS = 0x09
  M4G = 0x0A
  NDOF_FMC_OFF = 0x0B
  NDOF = 0x0C


class PowerMode(IntEnum):
  NORMAL = 0x00
  LOW_POWER = 0x01
  SUSPEND = 0x02


class SystemErrorCode(IntEnum):
  NO_ERROR = 0x00
  PERIPHERAL_INIT = 0x01
  SYSTEM_INIT = 0x02
  SELF_TEST_FAILED = 0x03
  REGISTER_VALUE_OUT_OF_RANGE = 0x04
  REGISTER_ADDRESS_OUT_OF_RANGE = 0x05
  REGISTER_WRITE = 0x06
  LOW_POWER_NOT_AVAILABLE = 0x07
  ACCEL_POWER_MODE_NOT_AVAILABLE = 0x08
  FUSION_CONFIG = 0x09
  SENSOR_CONFIG = 0x0A


SYSTEM_ERROR_DESCRIPTIONS = {
  SystemErrorCode.NO_ERROR: "no error",
  SystemErrorCode.PERIPHERAL_INIT: "peripheral initialization error",
  SystemErrorCode.SYSTEM_INIT: "system initialization error",
  SystemErrorCode.SELF_TEST_FAILED: "self test result failed",
  SystemErrorCode.REGISTER_VALUE_OUT_OF_RANGE: "register map value out of range",
  SystemErrorCode.REGISTER_ADDRESS_OUT_OF_RANGE: "register map address out of range",
  SystemErrorCode.REGISTER_WRITE: "register map write error",
  SystemErrorCode.LOW_POWER_NOT_AVAILABLE: "low power mode not available for selected operation mode",
  SystemErrorCode.ACCEL_POWER_MODE_NOT_AVAILABLE: "accelerometer power mode not available",
  SystemErrorCode.FUSION_CONFIG: "fusion algorithm configuration error",
  SystemErrorCode.SENSOR_CONFIG: "sensor configuration error",
}


def describe_system_error(code: int) -> str:
  return SYSTEM_ERROR_DESCRIPTIONS.get(code, f"unknown error 0x{code:02x}")


# SYS_TRIGGER commands
SYS_TRIGGER_SELF_TEST = 0x01
SYS_TRIGGER_RESET = 0x20

# SELFTEST_RESULT bits: accelerometer, magnetometer, gyroscope, MCU
SELF_TEST_ALL_PASSED = 0x0F

# UNIT_SEL: Android orientation, Celsius, degrees, rad/s, m/s^2
UNIT_SELECTION = (
  (1 << 7) |  # Orientation = Android
  (0 << 4) |  # Temperature = Celsius
  (0 << 2) |  # Euler = Degrees
  (1 << 1) |  # Gyro = rad/s
  (0 << 0)    # Accelerometer = m/s^2
)
