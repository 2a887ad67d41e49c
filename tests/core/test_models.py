"""
Tests for the forecast model union.
"""
import pytest
from pydantic import ValidationError

from seriescope.core.domain.models import (
    Arima,
    Autoregressive,
    ExponentialSmoothing,
    MovingAverage,
    Prophet,
    SeasonalDecompositionModel,
    parse_model,
)


def test_parse_model_from_kind_name():
    assert parse_model("prophet") == Prophet()
    assert parse_model("exponential_smoothing") == ExponentialSmoothing()


def test_parse_model_from_mapping():
    model = parse_model({"kind": "arima", "p": 2, "d": 1, "q": 1})

    assert isinstance(model, Arima)
    assert (model.p, model.d, model.q) == (2, 1, 1)


def test_parse_model_passes_instances_through():
    model = MovingAverage(order=5)
    assert parse_model(model) is model


def test_parse_model_rejects_unknown_kind():
    with pytest.raises(ValidationError):
        parse_model({"kind": "lstm"})


def test_model_parameter_validation():
    with pytest.raises(ValidationError):
        Autoregressive(order=0)
    with pytest.raises(ValidationError):
        SeasonalDecompositionModel(period=1)
    with pytest.raises(ValidationError):
        ExponentialSmoothing(alpha=1.5)


def test_models_are_frozen():
    model = Autoregressive(order=2)
    with pytest.raises(ValidationError):
        model.order = 3
