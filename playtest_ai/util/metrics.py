import numpy as np


class RollingWindow:
    """Keep the most recent N samples of a value in a fixed numpy buffer.

    Used for the per-action score history of the decision engine: once the
    buffer is full, each new sample overwrites the oldest one.
    """

    def __init__(self, num_samples: int = 100) -> None:
        if num_samples <= 0:
            raise ValueError("num_samples must be positive")
        self.num_samples = num_samples
        self.samples = np.zeros(num_samples, dtype=np.float64)
        self.count = 0
        self.write_index = 0

    def record(self, value: float) -> None:
        self.samples[self.write_index] = value
        self.write_index = (self.write_index + 1) % self.num_samples
        self.count += 1

    def values(self) -> np.ndarray:
        """Samples in recording order, oldest first."""
        if self.count <= self.num_samples:
            return self.samples[: self.count].copy()
        return np.concatenate(
            [self.samples[self.write_index :], self.samples[: self.write_index]]
        )

    def get_percentiles(self) -> tuple[float, float, float]:
        """Return (p50, p95, p99) as a tuple of floats."""
        valid = self.values()
        if len(valid) == 0:
            return (0.0, 0.0, 0.0)
        p50, p95, p99 = np.percentile(valid, [50, 95, 99])
        return (float(p50), float(p95), float(p99))

    def get_percentiles_string(self) -> str:
        p50, p95, p99 = self.get_percentiles()
        return f"p50={p50:.2f} p95={p95:.2f} p99={p99:.2f}"
