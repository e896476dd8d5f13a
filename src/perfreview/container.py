"""Dependency injection container for the review core."""

from __future__ import annotations

from dependency_injector import containers, providers

from .adapters import ApiRecordAdapter, FormPayloadAdapter
from .core import (
    EvaluationClassifier,
    ResetApprovalPoller,
    ReviewCore,
    ScoreAggregator,
    SignatureLifecycle,
)
from .pipeline import AdapterRegistry, ReviewPipeline


class ReviewContainer(containers.DeclarativeContainer):
    """Dependency-injector container definition."""

    config = providers.Configuration()

    form_adapter = providers.Singleton(FormPayloadAdapter)
    api_adapter = providers.Singleton(ApiRecordAdapter)

    adapter_registry = providers.Singleton(
        AdapterRegistry,
        adapters=providers.List(form_adapter, api_adapter),
    )

    score_aggregator = providers.Singleton(
        ScoreAggregator,
        score_weights=config.core.score_weights,
        pass_threshold=config.core.pass_threshold,
    )
    classifier = providers.Singleton(EvaluationClassifier)

    review_core = providers.Singleton(
        ReviewCore,
        aggregator=score_aggregator,
        classifier=classifier,
    )

    signature_lifecycle = providers.Factory(
        SignatureLifecycle,
        storage_base_url=config.signature.storage_base_url,
    )

    reset_poller = providers.Factory(
        ResetApprovalPoller,
        interval=config.signature.poll_interval_seconds,
        request_timeout=config.signature.request_timeout_seconds,
    )

    pipeline = providers.Factory(
        ReviewPipeline,
        core=review_core,
        registry=adapter_registry,
    )


def create_container(*, settings: dict | None = None) -> ReviewContainer:
    """Instantiate container with optional overrides."""

    container = ReviewContainer()

    if not settings or not isinstance(settings, dict):
        return container

    overrides = {
        section: settings[section]
        for section in ("core", "signature")
        if settings.get(section)
    }
    if overrides:
        container.config.from_dict(overrides)

    return container
