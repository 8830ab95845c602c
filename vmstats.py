"""
Miss rate sweeps: run every algorithm across a range of frame counts and
tabulate the results
"""

from typing import Iterator, List, Sequence, Tuple

import matplotlib.pyplot as plt
import numpy as np

from virtualsim import (
    MAX_REFERENCES,
    InvalidFrameCount,
    UnwritableOutput,
    VirtualMemorySimulator,
    check_frame_count,
)

RATES_FILE = "vmrates.dat"
ALGORITHM_ORDER = ("opt", "lru", "fifo")


class SweepResult:
    """Miss rates indexed by algorithm (rows) and frame count (columns)"""

    def __init__(self, frame_counts: List[int], rates: np.ndarray,
                 algorithms: Tuple[str, ...] = ALGORITHM_ORDER):
        self.frame_counts = frame_counts
        self.rates = rates
        self.algorithms = algorithms

    def rate(self, algorithm: str, num_frames: int) -> float:
        row = self.algorithms.index(algorithm)
        col = self.frame_counts.index(num_frames)
        return float(self.rates[row, col])

    def rows(self) -> Iterator[Tuple[str, List[float]]]:
        for algorithm, row in zip(self.algorithms, self.rates):
            yield algorithm, row.tolist()


def frame_range(min_frames: int, max_frames: int, frame_increment: int) -> List[int]:
    check_frame_count(min_frames)
    check_frame_count(max_frames)
    if frame_increment <= 0:
        raise InvalidFrameCount(f"Frame increment must be positive, got {frame_increment}")
    if min_frames > max_frames:
        raise InvalidFrameCount(
            f"Minimum frames ({min_frames}) larger than maximum frames ({max_frames})")
    return list(range(min_frames, max_frames + 1, frame_increment))


def run_sweep(reference_string: Sequence[int], min_frames: int, max_frames: int,
              frame_increment: int, max_references: int = MAX_REFERENCES) -> SweepResult:
    frame_counts = frame_range(min_frames, max_frames, frame_increment)
    reference_string = tuple(reference_string)

    rates = np.zeros((len(ALGORITHM_ORDER), len(frame_counts)))
    for col, num_frames in enumerate(frame_counts):
        simulator = VirtualMemorySimulator(num_frames, max_references=max_references)
        for row, algorithm in enumerate(ALGORITHM_ORDER):
            rates[row, col] = simulator.run(reference_string, algorithm).miss_rate
    return SweepResult(frame_counts, rates)


def write_rates(sweep: SweepResult, path: str = RATES_FILE):
    """Write the frame count header row followed by one row of miss rates per algorithm"""
    header = " ".join(str(num_frames) for num_frames in sweep.frame_counts)
    try:
        with open(path, "w") as f:
            np.savetxt(f, sweep.rates, fmt="%.2f", header=header, comments="")
    except OSError as e:
        raise UnwritableOutput(f"Unable to create results file {path}: {e.strerror}") from e


def plot_miss_rates(sweep: SweepResult, path: str):
    fig, ax = plt.subplots(figsize=(8, 5))
    for algorithm, row in sweep.rows():
        ax.plot(sweep.frame_counts, row, marker="o", label=algorithm.upper())

    ax.set_title("Miss Rate vs. Number of Frames")
    ax.set_xlabel("Frames")
    ax.set_ylabel("Miss rate (%)")
    ax.set_xticks(sweep.frame_counts)
    ax.grid(alpha=0.3)
    ax.legend()

    try:
        fig.savefig(path, dpi=150, bbox_inches="tight")
    except OSError as e:
        raise UnwritableOutput(f"Unable to save plot {path}: {e.strerror}") from e
    finally:
        plt.close(fig)
