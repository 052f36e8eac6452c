"""
Connection health accounting.

Counts logical requests and transport timeouts. When either counter passes
1000 both are quartered before the next request is counted, so the ratio
weights recent traffic more than old traffic.
"""

DECAY_THRESHOLD = 1000
DECAY_DIVISOR = 4


class HealthMonitor:
  def __init__(self):
    self.packets = 0
    self.timeouts = 0

  def record_attempt(self) -> None:
    """Count one logical request, decaying both counters first if either is over threshold."""
    if self.packets // DECAY_THRESHOLD > 0 or self.timeouts // DECAY_THRESHOLD > 0:
      self.packets //= DECAY_DIVISOR
      self.timeouts //= DECAY_DIVISOR
    self.packets += 1

  def record_timeout(self) -> None:
    self.timeouts += 1

  def connection_health(self) -> float:
    """100 minus the timeout percentage. 100.0 before any request was sent."""
    if self.packets == 0:
      return 100.0
    return 100.0 - (self.timeouts * 100.0 / self.packets)
