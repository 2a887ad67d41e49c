from pydantic import BaseModel, Field

from seriescope.core.analysis.statistics import z_multiplier


class EngineSettings(BaseModel):
    """
    Tunable constants of the analysis engine.
    """
    # Preconditions
    forecast_min_points: int = Field(default=10, ge=1, description="Minimum samples accepted by forecast()")
    decomposition_min_points: int = Field(default=24, ge=1, description="Minimum samples accepted by decompose()")
    max_horizon: int = Field(default=100, ge=1, description="Largest forecast horizon accepted")

    # Forecasting
    exponential_smoothing_alpha: float = Field(default=0.3, gt=0.0, le=1.0, description="Default smoothing factor")
    fixed_confidence_multiplier: float | None = Field(
        default=None,
        gt=0.0,
        description="If set, interval half-width multiplier used for every confidence level (e.g. 1.96)",
    )

    # Seasonality
    max_seasonal_period: int = Field(default=365, ge=2, description="Upper bound of the period search")
    default_seasonal_period: int = Field(default=7, ge=2, description="Period used when no lag correlates positively")

    # Trend
    significance_level: float = Field(default=0.05, gt=0.0, lt=1.0, description="p-value cut-off for a trend")
    change_point_sigma: float = Field(default=2.0, gt=0.0, description="Mean shift, in window std units, that marks a change point")

    # Anomaly detection
    isolation_trees: int = Field(default=10, ge=1, description="Number of isolation trees")
    isolation_subsample_size: int = Field(default=256, ge=2, description="Max subsample size per isolation tree")
    random_seed: int | None = Field(default=None, description="Seed for the isolation forest random source")

    def confidence_multiplier(self, confidence_level: float) -> float:
        """Half-width multiplier for a symmetric interval at ``confidence_level``."""
        if self.fixed_confidence_multiplier is not None:
            return self.fixed_confidence_multiplier
        return z_multiplier(confidence_level)
