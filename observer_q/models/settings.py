"""
Per-user calibration settings.

``CalibrationSettings`` is the engine's view of the stored user settings row:
the symbiosis constant that shapes the collapse bias and the two thresholds
that band a Q score into tank / neutral / ocean.

Threshold ordering is enforced here, at construction time, so the classifier
itself can stay a total function.
"""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, field_validator, model_validator


class CalibrationSettings(BaseModel):
    """Symbiosis constant plus Q-band thresholds for one user.

    Attributes:
        k_symbiosis: Weight of the logarithmic term in the collapse bias.
        k_death: Stored alongside the other settings; not used by the engine.
        ocean_threshold: Q at or above this is ``ocean``.
        tank_threshold: Q strictly below this is ``tank``.
    """

    model_config = ConfigDict(frozen=True)

    k_symbiosis: float = 2.8
    k_death: float = 0.0
    ocean_threshold: float = 0.8
    tank_threshold: float = 0.5

    @field_validator("k_symbiosis", "k_death")
    @classmethod
    def validate_finite(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError(f"Symbiosis constants must be finite, got {v}.")
        return v

    @model_validator(mode="after")
    def validate_threshold_order(self) -> "CalibrationSettings":
        for name in ("tank_threshold", "ocean_threshold"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be in [0.0, 1.0], got {value}.")
        if self.tank_threshold > self.ocean_threshold:
            raise ValueError(
                f"tank_threshold ({self.tank_threshold}) must be <= "
                f"ocean_threshold ({self.ocean_threshold})."
            )
        return self
