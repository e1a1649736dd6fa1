from __future__ import annotations

from fastapi import Depends
from sqlalchemy.orm import Session

from launchpad.application.startup_service import StartupService
from launchpad.config import Settings, get_settings, settings
from launchpad.db.database import get_db
from launchpad.infrastructure.pubsub import PubSub

# One broker per process; subscriptions live as long as their connections
pubsub = PubSub(max_buffer=settings.PUBSUB_MAX_BUFFER)


def get_pubsub() -> PubSub:
    return pubsub


def get_startup_service(
    db: Session = Depends(get_db),
    broker: PubSub = Depends(get_pubsub),
    config: Settings = Depends(get_settings),
) -> StartupService:
    return StartupService(
        db,
        broker,
        default_limit=config.DEFAULT_PAGE_SIZE,
        max_limit=config.MAX_PAGE_SIZE,
    )
