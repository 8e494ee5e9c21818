from __future__ import annotations

from dataclasses import dataclass

from ..common.validators import parse_mode
from ..core.enums import DisplayMode
from .strategies.base import ViewStrategy
from .strategies.time_in_strategy import TimeInStrategy
from .strategies.time_out_strategy import TimeOutStrategy


@dataclass
class ViewStrategyFactory:
    """Factory Pattern: choose the categorization strategy for a display mode."""

    def for_mode(self, mode: DisplayMode | str) -> ViewStrategy:
        mode = parse_mode(mode)
        if mode == DisplayMode.TIME_OUT:
            return TimeOutStrategy()
        return TimeInStrategy()
