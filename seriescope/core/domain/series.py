"""
Series Domain Model - The time-indexed input accepted by every operation.
"""

from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any, Iterable, Mapping

import numpy as np
import pandas as pd

from seriescope.core.domain.errors import InvalidInputError


@dataclass(frozen=True)
class TimeSeriesData:
    """
    An ordered sequence of (timestamp, value) pairs plus free-form metadata.

    Timestamps are assumed to be non-decreasing; this is not checked.
    """

    timestamps: tuple[datetime, ...]
    values: tuple[float, ...]
    metadata: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        # Lists and arrays are stored as tuples, metadata as a read-only copy
        object.__setattr__(self, "timestamps", tuple(self.timestamps))
        object.__setattr__(self, "values", tuple(float(v) for v in self.values))
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))
        if len(self.timestamps) != len(self.values):
            raise InvalidInputError(
                f"timestamps and values must have equal length "
                f"(got {len(self.timestamps)} and {len(self.values)})"
            )

    def __len__(self) -> int:
        return len(self.values)

    @classmethod
    def from_values(
        cls,
        values: Iterable[float],
        start: datetime | str | None = None,
        freq: str = "D",
        metadata: dict[str, Any] | None = None,
    ) -> "TimeSeriesData":
        """
        Build a series from bare values, synthesizing evenly spaced timestamps.

        Args:
            values: Observations in chronological order
            start: First timestamp (default: 2024-01-01)
            freq: Pandas offset alias for the spacing
            metadata: Optional metadata map
        """
        values = list(values)
        index = pd.date_range(start=start or "2024-01-01", periods=len(values), freq=freq)
        return cls(
            timestamps=tuple(index.to_pydatetime()),
            values=tuple(values),
            metadata=dict(metadata or {}),
        )

    @classmethod
    def from_frame(cls, df: pd.DataFrame, metadata: dict[str, Any] | None = None) -> "TimeSeriesData":
        """
        Build a series from a DataFrame with columns ['ds', 'y'] (and optionally 'unique_id').
        """
        missing = {"ds", "y"} - set(df.columns)
        if missing:
            raise InvalidInputError(f"DataFrame must contain columns ['ds', 'y'], missing {sorted(missing)}")

        meta = dict(metadata or {})
        if "unique_id" in df.columns and len(df) > 0:
            meta.setdefault("unique_id", df["unique_id"].iloc[0])

        return cls(
            timestamps=tuple(ts.to_pydatetime() for ts in pd.to_datetime(df["ds"])),
            values=tuple(df["y"].astype(float).tolist()),
            metadata=meta,
        )

    def to_frame(self) -> pd.DataFrame:
        """Return the series as a ['ds', 'y', 'unique_id'] DataFrame."""
        return pd.DataFrame({
            "ds": pd.to_datetime(list(self.timestamps)),
            "y": list(self.values),
            "unique_id": self.metadata.get("unique_id", "series"),
        })

    def as_array(self) -> np.ndarray:
        return np.asarray(self.values, dtype=float)
