import csv
import logging
from collections import deque

log = logging.getLogger("telemetry")

COLUMNS = ["t", "rpm", "throttle", "torque", "horsepower", "running"]


class TelemetryLog:
    """Engine time series written to CSV. The file is opened on the first row."""

    def __init__(self, path):
        self.path = path
        self._file = None
        self._writer = None
        self.rows = 0

    def write(self, t, state):
        if not self.path: return
        if self._writer is None:
            self._file = open(self.path, "w", newline="")
            self._writer = csv.writer(self._file)
            self._writer.writerow(COLUMNS)
            log.info("Writing telemetry to %s", self.path)
        self._writer.writerow([
            f"{t:.4f}", f"{state['rpm']:.2f}", f"{state['throttle']:.2f}",
            f"{state['torque']:.3f}", f"{state['horsepower']:.3f}", int(state["running"]),
        ])
        self.rows += 1

    def close(self):
        if self._file is None: return
        self._file.close()
        self._file = self._writer = None
        log.info("Telemetry closed after %d rows", self.rows)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


class History:
    """Rolling window of samples with a slowly decaying display ceiling."""

    def __init__(self, maxlen=100):
        self.data = deque(maxlen=maxlen)
        self.max_val = 1.0

    def update(self, value):
        self.data.append(value)
        if value > self.max_val: self.max_val = value
        elif self.max_val > 1.0 and value < self.max_val * 0.9: self.max_val *= 0.99

    def normalized(self):
        return [v / (self.max_val + 1e-6) for v in self.data]

    def clear(self):
        self.data.clear()
        self.max_val = 1.0
