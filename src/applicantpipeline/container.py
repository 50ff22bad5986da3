"""Dependency injection container for the applicant pipeline."""

from __future__ import annotations

from typing import Any

from dependency_injector import containers, providers

from .adapters import InMemoryApplicantStore, RestApplicantStore
from .core import ApplicantStoreClient
from .notifications import NotificationCenter
from .pipeline import ApplicantPipeline
from .schemas import AnalyticsConfig, AppConfig, ExportConfig


class PipelineContainer(containers.DeclarativeContainer):
    """Dependency-injector container definition."""

    config = providers.Configuration()

    memory_store = providers.Singleton(
        InMemoryApplicantStore.from_path,
        path=config.store.path,
    )

    rest_store = providers.Singleton(
        RestApplicantStore,
        endpoint=config.store.endpoint,
        api_key=config.store.api_key,
        table=config.store.table,
        timeout=config.store.timeout,
    )

    store_backend = providers.Selector(
        config.store.backend,
        memory=memory_store,
        rest=rest_store,
    )

    store_client = providers.Singleton(ApplicantStoreClient, backend=store_backend)

    export_config = providers.Singleton(ExportConfig.model_validate, config.export)
    analytics_config = providers.Singleton(AnalyticsConfig.model_validate, config.analytics)

    notifications = providers.Factory(NotificationCenter)

    pipeline = providers.Factory(
        ApplicantPipeline,
        client=store_client,
        export_config=export_config,
        analytics_config=analytics_config,
        notifications=notifications,
    )


def create_container(*, settings: AppConfig | dict[str, Any] | None = None) -> PipelineContainer:
    """Instantiate the container from validated settings."""

    if isinstance(settings, AppConfig):
        app_config = settings
    else:
        app_config = AppConfig.model_validate(settings or {})

    container = PipelineContainer()
    container.config.from_dict(app_config.to_settings())
    return container
