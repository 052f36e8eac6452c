"""
Decoders for BNO055 register payloads.

Quaternion registers hold four little-endian int16 values in the order
W, X, Y, Z with 1 unit = 1/2^14. The calibration status register packs four
2-bit confidence levels, 3 meaning fully calibrated.
"""
import struct
from dataclasses import dataclass, field

QUATERNION_SCALE = 1.0 / (1 << 14)
QUATERNION_DATA_SIZE = 8
CALIBRATION_FULL = 3


@dataclass(frozen=True)
class OrientationSample:
  """Unit quaternion reported by the fusion engine."""
  w: float = 0.0
  x: float = 0.0
  y: float = 0.0
  z: float = 0.0

  def as_tuple(self) -> tuple[float, float, float, float]:
    return (self.w, self.x, self.y, self.z)


@dataclass(frozen=True)
class CalibrationStatus:
  raw: int = 0
  magnetometer: int = 0
  accelerometer: int = 0
  gyroscope: int = 0
  system: int = 0

  @property
  def is_fully_calibrated(self) -> bool:
    return all(level == CALIBRATION_FULL for level in
               (self.magnetometer, self.accelerometer, self.gyroscope, self.system))


@dataclass
class SensorValues:
  """Latest decoded values of one device."""
  position: OrientationSample = field(default_factory=OrientationSample)
  calibration: CalibrationStatus = field(default_factory=CalibrationStatus)


def decode_quaternion(data: bytes) -> OrientationSample:
  if len(data) < QUATERNION_DATA_SIZE:
    raise ValueError(f"quaternion data needs {QUATERNION_DATA_SIZE} bytes, got {len(data)}")
  w, x, y, z = struct.unpack_from('<4h', data, 0)
  return OrientationSample(
    w=w * QUATERNION_SCALE,
    x=x * QUATERNION_SCALE,
    y=y * QUATERNION_SCALE,
    z=z * QUATERNION_SCALE,
  )


def decode_calibration(value: int) -> CalibrationStatus:
  return CalibrationStatus(
    raw=value,
    magnetometer=value & 0x3,
    accelerometer=(value >> 2) & 0x3,
    gyroscope=(value >> 4) & 0x3,
    system=(value >> 6) & 0x3,
  )


def decode_temperature(value: int) -> int:
  """TEMP is a signed byte in degrees Celsius with the unit selection used here."""
  return struct.unpack('<b', bytes([value & 0xFF]))[0]
