from __future__ import annotations

from typing import Any, Dict, Literal

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_BAND_COLOR = "#a78bfa"


class LineStyle(BaseModel):
    model_config = ConfigDict(frozen=True)

    visible: bool = True
    color: str = DEFAULT_BAND_COLOR
    line_width: int = Field(default=1, ge=1, le=10)
    line_style: Literal["solid", "dashed"] = "solid"


class FillStyle(BaseModel):
    model_config = ConfigDict(frozen=True)

    visible: bool = True
    opacity: float = Field(default=0.1, ge=0.0, le=1.0)


class BandStyles(BaseModel):
    model_config = ConfigDict(frozen=True)

    basis: LineStyle = LineStyle()
    upper: LineStyle = LineStyle()
    lower: LineStyle = LineStyle()
    fill: FillStyle = FillStyle()


class IndicatorSettings(BaseModel):
    """Bollinger Bands inputs and presentation.

    Only the simple moving average over closing prices is supported, so
    ``ma_type`` and ``source`` accept a single value each. The window and
    multiplier constraints are checked here for editors; the computation
    re-checks them and raises ``InvalidSettings``.
    """

    model_config = ConfigDict(frozen=True)

    length: int = Field(default=20, ge=1)
    ma_type: Literal["SMA"] = "SMA"
    source: Literal["close"] = "close"
    std_dev_multiplier: float = Field(default=2.0, gt=0, allow_inf_nan=False)
    offset: int = 0
    style: BandStyles = BandStyles()


DEFAULT_SETTINGS = IndicatorSettings()


def settings_to_dict(settings: IndicatorSettings) -> Dict[str, Any]:
    return settings.model_dump()


def settings_from_dict(data: Dict[str, Any]) -> IndicatorSettings:
    return IndicatorSettings.model_validate(data)


def settings_to_json(settings: IndicatorSettings) -> str:
    return settings.model_dump_json()


def settings_from_json(raw: str) -> IndicatorSettings:
    return IndicatorSettings.model_validate_json(raw)
