#!/usr/bin/env python3
"""
Tests for request retry and health accounting.
"""
import pytest

from bno055d.sensors.bno055_errors import FrameError, TransportTimeout
from bno055d.sensors.bno055_registers import RegisterAddress
from bno055d.sensors.connection_health import HealthMonitor
from bno055d.sensors.retry_controller import RetryController


@pytest.fixture
def link(fake_sensor):
  fake_sensor.open()
  return RetryController(fake_sensor, HealthMonitor(), retry_max=5)


class TestRead:
  def test_read_payload(self, link, fake_sensor):
    fake_sensor.registers[RegisterAddress.TEMP] = 0x19
    assert link.attempt_read(RegisterAddress.TEMP, 1) == bytes([0x19])
    assert fake_sensor.sent == [bytes([0xAA, 0x01, 0x34, 0x01])]
    assert link.health.packets == 1
    assert link.health.timeouts == 0

  def test_retry_exhaustion(self, link, fake_sensor):
    fake_sensor.always_timeout = True
    with pytest.raises(TransportTimeout):
      link.attempt_read(RegisterAddress.TEMP, 1)
    assert len(fake_sensor.sent) == 6
    assert link.health.timeouts == 6
    assert link.health.packets == 1

  def test_recovers_after_timeouts(self, link, fake_sensor):
    fake_sensor.registers[RegisterAddress.CALIB_STAT] = 0xFF
    fake_sensor.drop_responses = 2
    assert link.attempt_read(RegisterAddress.CALIB_STAT, 1) == bytes([0xFF])
    assert len(fake_sensor.sent) == 3
    assert link.health.timeouts == 2
    assert link.health.packets == 1
    assert link.health.connection_health() == -100.0

  def test_zero_retries(self, fake_sensor):
    fake_sensor.open()
    fake_sensor.always_timeout = True
    link = RetryController(fake_sensor, HealthMonitor(), retry_max=0)
    with pytest.raises(TransportTimeout):
      link.attempt_read(RegisterAddress.TEMP, 1)
    assert len(fake_sensor.sent) == 1

  def test_bad_header_not_retried(self, link, fake_sensor):
    fake_sensor.read_header = 0xEE
    with pytest.raises(FrameError):
      link.attempt_read(RegisterAddress.TEMP, 1)
    assert len(fake_sensor.sent) == 1
    assert link.health.timeouts == 0

  def test_negative_retry_max(self, fake_sensor):
    with pytest.raises(ValueError):
      RetryController(fake_sensor, HealthMonitor(), retry_max=-1)


class TestWrite:
  def test_write_with_ack(self, link, fake_sensor):
    link.attempt_write(RegisterAddress.PAGE_ID, bytes([0]))
    assert fake_sensor.sent == [bytes([0xAA, 0x00, 0x07, 0x01, 0x00])]
    assert fake_sensor.writes == [(RegisterAddress.PAGE_ID, bytes([0]))]

  def test_bad_ack(self, link, fake_sensor):
    fake_sensor.ack = bytes([0xEE, 0x07])
    with pytest.raises(FrameError):
      link.attempt_write(RegisterAddress.PAGE_ID, bytes([0]))
    assert len(fake_sensor.sent) == 1

  def test_write_without_ack_skips_read(self, link, fake_sensor):
    fake_sensor.always_timeout = True
    link.attempt_write(RegisterAddress.SYS_TRIGGER, bytes([0x20]), ack_required=False)
    assert len(fake_sensor.sent) == 1
    assert link.health.timeouts == 0
    assert link.health.packets == 1

  def test_stale_bytes_discarded(self, link, fake_sensor):
    # A late ack left over from a previous request must not be read as the next response
    fake_sensor._pending = bytes([0xEE, 0x01])
    fake_sensor.registers[RegisterAddress.TEMP] = 0x05
    assert link.attempt_read(RegisterAddress.TEMP, 1) == bytes([0x05])
