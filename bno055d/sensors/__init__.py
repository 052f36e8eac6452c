# BNO055 sensor driver for bno055d
#
# The BNO055 is reached over its UART interface (115200-8-N-1). Every
# register access is a framed request/response exchange:
#
#   read request    AA 01 <register> <length>
#   read response   BB <length> <payload...>
#   write request   AA 00 <register> <length> <payload...>
#   write ack       EE 01
#
# Modules:
#   - bno055_registers: register addresses and enumerated register values
#   - frame_codec: request encoding and response validation
#   - connection_health: decaying packet/timeout counters
#   - retry_controller: bounded retry on transport timeouts
#   - bno055_decoder: quaternion and calibration status decoding
#   - bno055: BNO055 device, bootstrap sequence and commands
#   - serial_transport: pyserial byte channel
#
# ============================================================================
# CONFIGURATION
# ============================================================================
#
# Environment variables:
#   BNO055_PORT                 Serial device or pyserial URL (default: /dev/ttyUSB0)
#   BNO055_RETRY_MAX            Retries after a request timeout (default: 5)
#   BNO055_POLL_HZ              Quaternion polling rate (default: 100)
#   BNO055_CALIBRATION_HZ       Calibration status polling rate (default: 1)
#   LOGLEVEL                    Log level (default: INFO)
#
# ----------------------------------------------------------------------------
# BOOTSTRAP
# ----------------------------------------------------------------------------
# Each step is followed by a 300 ms settle delay:
#   1. open the port, 1000 ms timeouts
#   2. operating mode CONFIG
#   3. power mode NORMAL
#   4. page 0
#   5. units: Android orientation, Celsius, degrees, rad/s, m/s^2
#   6. self test, must report 0x0F
#   7. system error, must report 0x00
#   8. operating mode NDOF, 30 ms timeouts
#
# To poll a sensor from the command line:
#    python -m bno055d.sensord --port /dev/ttyUSB0
