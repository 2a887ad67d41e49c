"""
Forecast Model Domain - The closed set of forecasting strategies.

Each strategy is a frozen Pydantic model tagged by ``kind`` so it can be
validated from YAML/JSON configuration and dispatched with a single ``match``.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class _ModelSpec(BaseModel):
    model_config = ConfigDict(frozen=True)


class Autoregressive(_ModelSpec):
    """AR(order) fitted with the Yule-Walker equations."""

    kind: Literal["autoregressive"] = "autoregressive"
    order: int = Field(default=1, ge=1)


class MovingAverage(_ModelSpec):
    """Mean of the last ``order`` observations."""

    kind: Literal["moving_average"] = "moving_average"
    order: int = Field(default=3, ge=1)


class Arima(_ModelSpec):
    """ARIMA(p, d, q). The MA order ``q`` is carried but not modelled."""

    kind: Literal["arima"] = "arima"
    p: int = Field(default=1, ge=1)
    d: int = Field(default=1, ge=0)
    q: int = Field(default=0, ge=0)


class ExponentialSmoothing(_ModelSpec):
    """Single exponential smoothing."""

    kind: Literal["exponential_smoothing"] = "exponential_smoothing"
    alpha: float | None = Field(default=None, gt=0.0, le=1.0)  # None -> settings default (0.3)


class SeasonalDecompositionModel(_ModelSpec):
    """Trend extrapolation plus tiled seasonal pattern."""

    kind: Literal["seasonal_decomposition"] = "seasonal_decomposition"
    period: int | None = Field(default=None, ge=2)


class Prophet(_ModelSpec):
    """Linear trend plus day-of-week seasonal offsets."""

    kind: Literal["prophet"] = "prophet"


ForecastModel = Annotated[
    Union[
        Autoregressive,
        MovingAverage,
        Arima,
        ExponentialSmoothing,
        SeasonalDecompositionModel,
        Prophet,
    ],
    Field(discriminator="kind"),
]

_forecast_model_adapter = TypeAdapter(ForecastModel)


def parse_model(data: "dict | str | BaseModel") -> ForecastModel:
    """
    Build a forecast model from configuration.

    Accepts an existing model instance, a bare kind name (``"prophet"``) or a
    mapping such as ``{"kind": "arima", "p": 2, "d": 1}``.
    """
    if isinstance(data, _ModelSpec):
        return data
    if isinstance(data, str):
        data = {"kind": data}
    return _forecast_model_adapter.validate_python(data)
