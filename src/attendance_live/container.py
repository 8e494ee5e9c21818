from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Optional

from .attendance.factory import ViewStrategyFactory
from .common.datetime_utils import today_local
from .core.constants import DEFAULT_GROUP, DEFAULT_NON_ATTENDANCE_WEEKDAYS
from .core.enums import DisplayMode
from .engine import LiveAttendanceEngine
from .roster.selection import SelectionState
from .store.base import RemoteStore
from .store.memory import InMemoryRemoteStore


@dataclass(frozen=True)
class Container:
    store: RemoteStore
    strategy_factory: ViewStrategyFactory
    engine: LiveAttendanceEngine


def build_store(settings) -> RemoteStore:
    seed_path = getattr(settings, "SEED_PATH", "") or ""
    if seed_path and Path(seed_path).expanduser().exists():
        return InMemoryRemoteStore.from_seed_file(seed_path)
    return InMemoryRemoteStore()


def build_container(*, settings, store: Optional[RemoteStore] = None, day: Optional[date] = None) -> Container:
    store = store if store is not None else build_store(settings)
    strategy_factory = ViewStrategyFactory()

    selection = SelectionState(
        group=str(getattr(settings, "DEFAULT_GROUP", DEFAULT_GROUP)),
        day=day or today_local(),
        mode=DisplayMode.TIME_IN,
    )
    engine = LiveAttendanceEngine(
        store,
        selection,
        skip_non_attendance_days=bool(getattr(settings, "SKIP_NON_ATTENDANCE_DAYS", True)),
        non_attendance_weekdays=getattr(settings, "NON_ATTENDANCE_WEEKDAYS", DEFAULT_NON_ATTENDANCE_WEEKDAYS),
        strategy_factory=strategy_factory,
    )

    return Container(store=store, strategy_factory=strategy_factory, engine=engine)
