from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .dashboard.service import DashboardService
from .prediction.service import PredictionEngine
from .sync.coordinator import SyncCoordinator
from .sync.credentials import CredentialStore, InMemoryCredentialStore
from .sync.gateway import BackendGateway


@dataclass(frozen=True)
class Container:
    prediction_engine: PredictionEngine
    dashboard_service: DashboardService

    # None when the app runs without a backend (stateless predictions only).
    coordinator: Optional[SyncCoordinator] = None


def build_container(
    *,
    prediction_max_workers: int = 0,
    gateway: Optional[BackendGateway] = None,
    credentials: Optional[CredentialStore] = None,
) -> Container:
    prediction_engine = PredictionEngine(max_workers=prediction_max_workers)
    dashboard_service = DashboardService()

    coordinator = None
    if gateway is not None:
        coordinator = SyncCoordinator(
            gateway,
            credentials or InMemoryCredentialStore(),
            engine=prediction_engine,
        )

    return Container(
        prediction_engine=prediction_engine,
        dashboard_service=dashboard_service,
        coordinator=coordinator,
    )
