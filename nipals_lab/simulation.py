"""
simulation.py - Synthetic Batch Peak-Area Tables
================================================

Stand-in for the chromatography front end (simulation, smoothing, alignment,
binning): produces the small table the PCA engine actually consumes, i.e.
integrated peak areas per sample, with a controllable batch effect.

Model
-----
For batch b, replicate r and peak j:

    area[b, r, j] = base[j] * exp(shift[b, j] + noise[b, r, j])

with shift ~ N(0, batch_effect) drawn once per batch and peak, and
noise ~ N(0, replicate_noise). Both are multiplicative so areas stay positive.

Example Usage:
-------------
    >>> from nipals_lab.simulation import simulate_peak_areas
    >>> table = simulate_peak_areas(n_batches=5, replicates=6, rng=np.random.default_rng(1))
    >>> table.areas.columns.tolist()
    ['Area_peak_1', 'Area_peak_2', 'Area_peak_3', 'Area_peak_4']
    >>> table.batches.value_counts().to_dict()
    {'Batch_1': 6, 'Batch_2': 6, 'Batch_3': 6, 'Batch_4': 6, 'Batch_5': 6}
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np
import pandas as pd
from loguru import logger

from .errors import InvalidArgumentError


@dataclass(frozen=True)
class PeakAreaTable:
    """
    Peak areas with the batch each sample came from.

    Parameters
    ----------
    areas : pd.DataFrame
        Samples in rows (indexed by sample id), ``Area_peak_j`` columns.
    batches : pd.Series
        Batch label per sample, sharing the index of ``areas``.
    """
    areas: pd.DataFrame
    batches: pd.Series

    def with_batch_column(self, name: str = "batch") -> pd.DataFrame:
        """Areas with the batch labels appended as a column, ready for CSV export."""
        frame = self.areas.copy()
        frame[name] = self.batches
        return frame


def simulate_peak_areas(
    n_batches: int = 5,
    replicates: int = 6,
    n_peaks: int = 4,
    base_areas: Optional[Sequence[float]] = None,
    batch_effect: float = 0.15,
    replicate_noise: float = 0.03,
    rng: Optional[np.random.Generator] = None,
) -> PeakAreaTable:
    """
    Generate a peak-area table for several production batches.

    Parameters
    ----------
    n_batches : int, default=5
        Number of batches (lots).
    replicates : int, default=6
        Samples per batch.
    n_peaks : int, default=4
        Number of integrated peaks (variables).
    base_areas : sequence of float, optional
        Nominal area of each peak. Drawn uniformly from [50, 500] if omitted.
    batch_effect : float, default=0.15
        Standard deviation of the per-batch log shift.
    replicate_noise : float, default=0.03
        Standard deviation of the per-sample log noise.
    rng : np.random.Generator, optional
        Random source; a fresh default generator if omitted.

    Returns
    -------
    PeakAreaTable

    Raises
    ------
    InvalidArgumentError
        On non-positive sizes, negative noise levels, or base areas of the
        wrong length or sign.
    """
    if n_batches < 1 or replicates < 1 or n_peaks < 1:
        raise InvalidArgumentError(
            f"n_batches, replicates and n_peaks must be >= 1, "
            f"got {n_batches}, {replicates}, {n_peaks}"
        )
    if batch_effect < 0 or replicate_noise < 0:
        raise InvalidArgumentError(
            f"Noise levels must be non-negative, got batch_effect={batch_effect}, "
            f"replicate_noise={replicate_noise}"
        )

    rng = rng if rng is not None else np.random.default_rng()

    if base_areas is None:
        base = rng.uniform(50.0, 500.0, n_peaks)
    else:
        base = np.asarray(base_areas, dtype=float)
        if base.shape != (n_peaks,) or np.any(base <= 0):
            raise InvalidArgumentError(
                f"base_areas must hold {n_peaks} positive values, got {base_areas!r}"
            )

    shifts = rng.normal(0.0, batch_effect, (n_batches, 1, n_peaks))
    noise = rng.normal(0.0, replicate_noise, (n_batches, replicates, n_peaks))
    areas = base * np.exp(shifts + noise)

    batch_names = [f"Batch_{b + 1}" for b in range(n_batches)]
    sample_ids = [f"{name}_R{r + 1}" for name in batch_names for r in range(replicates)]
    columns = [f"Area_peak_{j + 1}" for j in range(n_peaks)]

    frame = pd.DataFrame(
        areas.reshape(n_batches * replicates, n_peaks),
        index=pd.Index(sample_ids, name="sample"),
        columns=columns,
    )
    batches = pd.Series(
        np.repeat(batch_names, replicates), index=frame.index, name="batch"
    )

    logger.info(
        f"Simulated {len(frame)} samples: {n_batches} batches x {replicates} replicates, "
        f"{n_peaks} peaks"
    )
    return PeakAreaTable(areas=frame, batches=batches)
