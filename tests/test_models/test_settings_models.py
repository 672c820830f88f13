"""Tests for CalibrationSettings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from observer_q.models.settings import CalibrationSettings


class TestCalibrationSettings:
    def test_defaults(self):
        s = CalibrationSettings()
        assert s.k_symbiosis == 2.8
        assert s.tank_threshold == 0.5
        assert s.ocean_threshold == 0.8

    def test_equal_thresholds_allowed(self):
        s = CalibrationSettings(tank_threshold=0.6, ocean_threshold=0.6)
        assert s.tank_threshold == s.ocean_threshold

    def test_inverted_thresholds_raise(self):
        with pytest.raises(ValidationError, match="tank_threshold"):
            CalibrationSettings(tank_threshold=0.9, ocean_threshold=0.4)

    @pytest.mark.parametrize("field", ["tank_threshold", "ocean_threshold"])
    def test_threshold_out_of_range_raises(self, field):
        with pytest.raises(ValidationError, match=field):
            CalibrationSettings(**{field: 1.5})

    def test_negative_k_allowed(self):
        assert CalibrationSettings(k_symbiosis=-1.0).k_symbiosis == -1.0

    def test_non_finite_k_raises(self):
        with pytest.raises(ValidationError, match="finite"):
            CalibrationSettings(k_symbiosis=float("inf"))

    def test_frozen_immutable(self, sample_settings):
        with pytest.raises(Exception):
            sample_settings.k_symbiosis = 1.0
