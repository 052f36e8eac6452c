#!/usr/bin/env python3
import argparse
import os
import threading
import time
from typing import Callable, Optional

from bno055d.common.swaglog import cloudlog
from bno055d.sensors.bno055 import BNO055
from bno055d.sensors.bno055_decoder import CalibrationStatus, OrientationSample
from bno055d.sensors.bno055_errors import BNO055Error

BNO055_PORT = os.environ.get("BNO055_PORT", "/dev/ttyUSB0")
BNO055_RETRY_MAX = int(os.environ.get("BNO055_RETRY_MAX", "5"))
BNO055_POLL_HZ = float(os.environ.get("BNO055_POLL_HZ", "100"))
BNO055_CALIBRATION_HZ = float(os.environ.get("BNO055_CALIBRATION_HZ", "1"))

HEALTH_WARNING_THRESHOLD = 50.0
HEALTH_WARNING_INTERVAL = 5.0

SampleCallback = Callable[[OrientationSample, CalibrationStatus], None]


def log_sample(position: OrientationSample, calibration: CalibrationStatus) -> None:
  cloudlog.debug(f"Quat: [{position.w:.4f}, {position.x:.4f}, {position.y:.4f}, {position.z:.4f}] "
                 f"Cal: sys={calibration.system} gyro={calibration.gyroscope} "
                 f"accel={calibration.accelerometer} mag={calibration.magnetometer}")


def polling_loop(sensor: BNO055, exit_event: threading.Event, rate: float = BNO055_POLL_HZ,
                 calibration_rate: float = BNO055_CALIBRATION_HZ,
                 on_sample: Optional[SampleCallback] = None) -> None:
  """
  Poll orientation every tick and calibration status at `calibration_rate`.

  Errors are logged and polling continues; the retry layer already absorbed
  short dropouts by the time an exception reaches this loop.
  """
  on_sample = on_sample or log_sample
  interval = 1.0 / rate
  calibration_interval = 1.0 / calibration_rate
  last_calibration = 0.0
  last_health_warning = 0.0
  next_tick = time.monotonic()

  while not exit_event.is_set():
    try:
      position = sensor.refresh_position()
      if time.monotonic() - last_calibration >= calibration_interval:
        sensor.refresh_calibration()
        last_calibration = time.monotonic()
      on_sample(position, sensor.calibration)
    except Exception:
      cloudlog.exception("Error in BNO055 polling loop")

    health = sensor.connection_health
    if health < HEALTH_WARNING_THRESHOLD and time.monotonic() - last_health_warning > HEALTH_WARNING_INTERVAL:
      cloudlog.warning(f"BNO055 connection health low: {health:.1f}%")
      last_health_warning = time.monotonic()

    next_tick += interval
    remaining = next_tick - time.monotonic()
    if remaining > 0:
      exit_event.wait(remaining)
    else:
      next_tick = time.monotonic()


def main(argv: Optional[list[str]] = None) -> int:
  parser = argparse.ArgumentParser(description="Poll a BNO055 over its UART register protocol")
  parser.add_argument("--port", default=BNO055_PORT, help="Serial device or pyserial URL")
  parser.add_argument("--retries", type=int, default=BNO055_RETRY_MAX, help="Retries after a request timeout")
  parser.add_argument("--rate", type=float, default=BNO055_POLL_HZ, help="Quaternion polling rate (Hz)")
  args = parser.parse_args(argv)

  sensor = BNO055(retries=args.retries)
  cloudlog.info(f"Starting BNO055 sensor on {args.port}")
  try:
    sensor.bootstrap(args.port)
    cloudlog.info(f"BNO055 temperature: {sensor.get_temperature()} C")
  except BNO055Error:
    cloudlog.exception("Failed to initialize BNO055 sensor")
    sensor.shutdown()
    return 1

  exit_event = threading.Event()
  thread = threading.Thread(target=polling_loop, args=(sensor, exit_event, args.rate), daemon=True)
  stopped_early = False
  try:
    thread.start()
    while thread.is_alive():
      time.sleep(1)
    stopped_early = not exit_event.is_set()
  except KeyboardInterrupt:
    pass
  finally:
    exit_event.set()
    if thread.is_alive():
      thread.join()
    sensor.shutdown()

  if stopped_early:
    cloudlog.error("BNO055 polling loop exited unexpectedly")
    return 1

  cloudlog.info("BNO055 sensor shutdown complete")
  return 0


if __name__ == "__main__":
  raise SystemExit(main())
