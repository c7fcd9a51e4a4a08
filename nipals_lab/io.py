"""
io.py - Result Serialization and Peak-Table Loading

This module handles saving and loading PCAResult to/from disk, and reading
peak-area tables exported by the chromatography pipeline.
Supported result formats:
- NPZ: NumPy's archive format (default)
- JSON: Human-readable format

Both formats preserve scores, loadings, variance accounting, scaling
parameters and labels.

Example Usage:
-------------
    >>> from nipals_lab.io import save_result, load_result, read_peak_table
    >>>
    >>> areas, batches = read_peak_table("peak_areas.csv", batch_column="batch")
    >>> result = nipals_pca(areas, n_comp=2, scale=True)
    >>> save_result(result, "pca.npz")
    >>> loaded = load_result("pca.npz")
"""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple, Union

import numpy as np
import pandas as pd

from .errors import InvalidArgumentError
from .types import PCAResult, ScalingParameters


class ResultFormat(str, Enum):
    """Supported result file formats."""
    NPZ = "npz"
    JSON = "json"


def save_result(
    result: PCAResult,
    path: Union[str, Path],
    format: ResultFormat = ResultFormat.NPZ
) -> None:
    """
    Save a PCA result to disk.

    Parameters
    ----------
    result : PCAResult
        The decomposition to save.
    path : str or Path
        Destination file path.
    format : ResultFormat, default=ResultFormat.NPZ
        Output format.

    Examples
    --------
    >>> save_result(result, "pca.npz")
    >>> save_result(result, "pca.json", format=ResultFormat.JSON)
    """
    path = Path(path)

    if format == ResultFormat.NPZ:
        _save_npz(result, path)
    elif format == ResultFormat.JSON:
        _save_json(result, path)
    else:
        raise ValueError(f"Unsupported format: {format}")


def load_result(path: Union[str, Path]) -> PCAResult:
    """
    Load a PCA result from disk.

    Parameters
    ----------
    path : str or Path
        Source file path. Format is inferred from extension.

    Returns
    -------
    PCAResult
        The loaded result.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    ValueError
        If the file format is not recognized or a required field is missing.
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Result file not found: {path}")

    if path.suffix == ".npz":
        loader = _load_npz
    elif path.suffix == ".json":
        loader = _load_json
    else:
        raise ValueError(f"Unknown result format: {path.suffix}")

    try:
        return loader(path)
    except KeyError as e:
        raise ValueError(f"Missing field {e} in result file {path}") from e


def _save_npz(result: PCAResult, path: Path) -> None:
    """Save result to NPZ format. Labels are stored as unicode arrays."""
    data = {
        "scores": result.scores,
        "loadings": result.loadings,
        "explained_variance": result.explained_variance,
        "residual_variance": result.residual_variance,
        "cumulative_variance": result.cumulative_variance,
        "scaling_mean": result.scaling.mean,
        "sample_labels": np.array(result.sample_labels, dtype=str),
        "variable_labels": np.array(result.variable_labels, dtype=str),
        "method": np.array(result.method),
        "iterations": np.array(result.iterations, dtype=int),
    }

    # Centering-only results have no scale vector
    if result.scaling.scale is not None:
        data["scaling_scale"] = result.scaling.scale

    np.savez(path, **data)


def _load_npz(path: Path) -> PCAResult:
    """Load result from NPZ format."""
    with np.load(path) as data:
        scale = data["scaling_scale"] if "scaling_scale" in data.files else None

        return PCAResult(
            scores=data["scores"],
            loadings=data["loadings"],
            explained_variance=data["explained_variance"],
            residual_variance=data["residual_variance"],
            cumulative_variance=data["cumulative_variance"],
            scaling=ScalingParameters(mean=data["scaling_mean"], scale=scale),
            sample_labels=data["sample_labels"].tolist(),
            variable_labels=data["variable_labels"].tolist(),
            method=str(data["method"].item()),
            iterations=data["iterations"].tolist(),
        )


def _save_json(result: PCAResult, path: Path) -> None:
    """Save result to JSON format."""
    data = {
        "method": result.method,
        "scores": result.scores.tolist(),
        "loadings": result.loadings.tolist(),
        "explained_variance": result.explained_variance.tolist(),
        "residual_variance": result.residual_variance.tolist(),
        "cumulative_variance": result.cumulative_variance.tolist(),
        "scaling": {
            "mean": result.scaling.mean.tolist(),
            "scale": None if result.scaling.scale is None else result.scaling.scale.tolist(),
        },
        "sample_labels": list(result.sample_labels),
        "variable_labels": list(result.variable_labels),
        "iterations": list(result.iterations),
    }

    with open(path, 'w') as f:
        json.dump(data, f, indent=2)


def _load_json(path: Path) -> PCAResult:
    """Load result from JSON format."""
    with open(path, 'r') as f:
        data = json.load(f)

    scale = data["scaling"]["scale"]

    return PCAResult(
        scores=np.array(data["scores"], dtype=float),
        loadings=np.array(data["loadings"], dtype=float),
        explained_variance=np.array(data["explained_variance"], dtype=float),
        residual_variance=np.array(data["residual_variance"], dtype=float),
        cumulative_variance=np.array(data["cumulative_variance"], dtype=float),
        scaling=ScalingParameters(
            mean=np.array(data["scaling"]["mean"], dtype=float),
            scale=None if scale is None else np.array(scale, dtype=float),
        ),
        sample_labels=data["sample_labels"],
        variable_labels=data["variable_labels"],
        method=data.get("method", "nipals"),
        iterations=data.get("iterations", []),
    )


def read_peak_table(
    path: Union[str, Path],
    batch_column: Optional[str] = None,
) -> Tuple[pd.DataFrame, Optional[pd.Series]]:
    """
    Read a peak-area CSV whose first column holds sample ids.

    Parameters
    ----------
    path : str or Path
        CSV file, one row per sample.
    batch_column : str, optional
        Name of a column holding batch labels. It is removed from the
        returned table and returned separately. The name must match exactly.

    Returns
    -------
    areas : pd.DataFrame
        Numeric peak areas indexed by sample id.
    batches : pd.Series or None
        Batch labels, when ``batch_column`` was given.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    InvalidArgumentError
        If ``batch_column`` is not a column of the table.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Peak table not found: {path}")

    frame = pd.read_csv(path, index_col=0)
    frame.index = frame.index.astype(str)

    batches = None
    if batch_column is not None:
        if batch_column not in frame.columns:
            raise InvalidArgumentError(
                f"Batch column '{batch_column}' not found; available columns: {list(frame.columns)}"
            )
        batches = frame.pop(batch_column).astype(str)

    return frame, batches
