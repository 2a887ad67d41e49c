"""
Anomaly Detector - Per-sample anomaly scoring.

Strategies:
- zscore: global z-score
- iqr: distance beyond the Tukey fences, in IQR units
- isolation_forest: inverse mean path depth over random partition trees
- statistical: z-score against a sliding local window

A sample is anomalous when ``abs(score) > threshold``.
"""

import logging
import math
from dataclasses import dataclass
from typing import Callable

import numpy as np

from seriescope.core.domain.result import AnomalyDetection
from seriescope.core.domain.series import TimeSeriesData
from seriescope.core.domain.settings import EngineSettings

logger = logging.getLogger(__name__)


def zscore_scores(values: np.ndarray) -> np.ndarray:
    std = values.std()
    if std <= 0:
        return np.zeros(len(values))
    return (values - values.mean()) / std


def iqr_scores(values: np.ndarray) -> np.ndarray:
    ordered = np.sort(values)
    n = len(ordered)
    q1 = ordered[n // 4]
    q3 = ordered[3 * n // 4]
    iqr = q3 - q1
    if iqr <= 0:
        return np.zeros(n)

    lower_fence = q1 - 1.5 * iqr
    upper_fence = q3 + 1.5 * iqr
    scores = np.zeros(n)
    below = values < lower_fence
    above = values > upper_fence
    scores[below] = (lower_fence - values[below]) / iqr
    scores[above] = (values[above] - upper_fence) / iqr
    return scores


def statistical_scores(values: np.ndarray) -> np.ndarray:
    n = len(values)
    window = min(10, n // 4)
    scores = np.zeros(n)
    for i in range(n):
        local = values[max(0, i - window):min(n, i + window + 1)]
        std = local.std()
        if std > 0:
            scores[i] = abs(values[i] - local.mean()) / std
    return scores


# --- Isolation forest ---

@dataclass(frozen=True)
class IsolationNode:
    """A node of a one-dimensional isolation tree. Leaves carry no split."""

    size: int
    split: float | None = None
    left: "IsolationNode | None" = None
    right: "IsolationNode | None" = None

    @property
    def is_leaf(self) -> bool:
        return self.split is None


def build_isolation_tree(
    sample: np.ndarray,
    depth: int,
    max_depth: int,
    rng: np.random.Generator,
) -> IsolationNode:
    if depth >= max_depth or len(sample) <= 1:
        return IsolationNode(size=len(sample))

    low, high = float(sample.min()), float(sample.max())
    if low == high:
        return IsolationNode(size=len(sample))

    split = float(rng.uniform(low, high))
    return IsolationNode(
        size=len(sample),
        split=split,
        left=build_isolation_tree(sample[sample < split], depth + 1, max_depth, rng),
        right=build_isolation_tree(sample[sample >= split], depth + 1, max_depth, rng),
    )


def average_path_length(size: int) -> float:
    """
    Expected path length of an unsuccessful search in a binary search tree of ``size`` points.

    Credits a leaf that still holds several points with the depth a full tree
    over them would have added.
    """
    if size <= 1:
        return 0.0
    if size == 2:
        return 1.0
    return 2.0 * (math.log(size - 1) + np.euler_gamma) - 2.0 * (size - 1) / size


def path_length(node: IsolationNode, value: float) -> float:
    depth = 0
    while not node.is_leaf:
        node = node.left if value < node.split else node.right
        depth += 1
    return depth + average_path_length(node.size)


def isolation_forest_scores(
    values: np.ndarray,
    n_trees: int = 10,
    max_subsample: int = 256,
    rng: np.random.Generator | None = None,
) -> np.ndarray:
    """
    Score each value by ``log2(subsample) / mean path depth``.

    Path depth includes the expected remaining depth of multi-point leaves, so
    runs of identical values are not mistaken for isolated points. Points that
    are isolated after few splits score high; typical points score around 1.
    A constant series scores 0 everywhere.
    """
    rng = rng or np.random.default_rng()
    n = len(values)
    subsample_size = min(max_subsample, n)
    if subsample_size <= 1 or values.min() == values.max():
        return np.zeros(n)

    max_depth = int(math.log2(subsample_size))
    total_depth = np.zeros(n)
    for _ in range(n_trees):
        sample = rng.choice(values, size=subsample_size, replace=False)
        tree = build_isolation_tree(sample, 0, max_depth, rng)
        total_depth += [path_length(tree, v) for v in values]

    mean_depth = total_depth / n_trees
    scores = np.zeros(n)
    reached = mean_depth > 0
    scores[reached] = math.log2(subsample_size) / mean_depth[reached]
    return scores


# --- Dispatch ---

_STRATEGIES: dict[str, str] = {
    "zscore": "zscore",
    "z_score": "zscore",
    "z-score": "zscore",
    "iqr": "iqr",
    "isolation_forest": "isolation_forest",
    "statistical": "statistical",
}


def _scorer(
    method: str,
    settings: EngineSettings,
    rng: np.random.Generator,
) -> Callable[[np.ndarray], np.ndarray]:
    strategy = _STRATEGIES.get(method.lower())
    if strategy is None:
        logger.warning(f"Unknown anomaly detection method '{method}', falling back to z-score")
        strategy = "zscore"

    if strategy == "iqr":
        return iqr_scores
    if strategy == "isolation_forest":
        return lambda values: isolation_forest_scores(
            values,
            n_trees=settings.isolation_trees,
            max_subsample=settings.isolation_subsample_size,
            rng=rng,
        )
    if strategy == "statistical":
        return statistical_scores
    return zscore_scores


def detect_anomalies(
    data: TimeSeriesData,
    method: str = "isolation_forest",
    threshold: float = 2.0,
    settings: EngineSettings | None = None,
    random_state: int | np.random.Generator | None = None,
) -> AnomalyDetection:
    """
    Score every sample and flag those whose absolute score exceeds ``threshold``.

    Args:
        data: Input series
        method: zscore | iqr | isolation_forest | statistical (unknown -> zscore)
        threshold: Absolute score cut-off
        settings: Engine settings (defaults if None)
        random_state: Seed or Generator for the isolation forest
            (defaults to settings.random_seed)

    Returns:
        AnomalyDetection echoing the requested method name
    """
    settings = settings or EngineSettings()
    if isinstance(random_state, np.random.Generator):
        rng = random_state
    else:
        rng = np.random.default_rng(random_state if random_state is not None else settings.random_seed)

    values = data.as_array()
    if len(values) == 0:
        scores = np.zeros(0)
    else:
        scores = _scorer(method, settings, rng)(values)

    anomalies = tuple(int(i) for i in np.flatnonzero(np.abs(scores) > threshold))
    logger.info(f"Anomaly detection '{method}' flagged {len(anomalies)} of {len(values)} points")

    return AnomalyDetection(
        anomalies=anomalies,
        scores=tuple(float(s) for s in scores),
        threshold=threshold,
        method=method,
    )
