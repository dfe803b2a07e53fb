"""
Dependency Injection Container

Wires the credential store, session manager, view controller and the
services built on them. Tests override individual providers, e.g.:

    container = build_container(responder=FakeResponder())
    startup(container)
    ...
    await shutdown(container)
"""
import logging
from typing import Optional

from dependency_injector import containers, providers

from compliance_assistant.config import settings
from compliance_assistant.domain.session import Session
from compliance_assistant.interfaces.responder import IResponder
from compliance_assistant.interfaces.restoration_store import IRestorationStore
from compliance_assistant.logging_client import setup_logger
from compliance_assistant.providers.http_responder import HttpResponder
from compliance_assistant.repositories.credential_store import InMemoryCredentialStore
from compliance_assistant.repositories.restoration_store import (
    InMemoryRestorationStore,
    JsonFileRestorationStore,
)
from compliance_assistant.seed import seed_demo_accounts
from compliance_assistant.services.message_exchange import MessageExchange
from compliance_assistant.services.role_administration import RoleAdministrationService
from compliance_assistant.services.session_manager import SessionManager
from compliance_assistant.services.upgrade_service import UpgradeService
from compliance_assistant.services.view_controller import ViewController

logger = logging.getLogger(__name__)


def make_restoration_store(path: Optional[str]) -> IRestorationStore:
    """JSON file when a path is configured, otherwise process memory."""
    if path:
        return JsonFileRestorationStore(path)
    return InMemoryRestorationStore()


class Container(containers.DeclarativeContainer):
    """Application dependency injection container."""

    # ========== Repositories ==========

    credential_store = providers.Singleton(
        InMemoryCredentialStore
    )

    restoration_store = providers.Singleton(
        make_restoration_store,
        path=settings.RESTORATION_FILE
    )

    # ========== Clients ==========

    responder = providers.Singleton(
        HttpResponder
    )

    # ========== Services ==========

    view_controller = providers.Singleton(
        ViewController
    )

    session_manager = providers.Singleton(
        SessionManager,
        store=credential_store,
        restoration_store=restoration_store,
        view=view_controller
    )

    message_exchange = providers.Singleton(
        MessageExchange,
        sessions=session_manager,
        store=credential_store,
        responder=responder
    )

    role_administration = providers.Singleton(
        RoleAdministrationService,
        sessions=session_manager,
        store=credential_store
    )

    upgrade_service = providers.Singleton(
        UpgradeService,
        sessions=session_manager,
        store=credential_store
    )


def build_container(
    responder: IResponder = None,
    restoration_store: IRestorationStore = None,
    seed_demo: bool = None
) -> Container:
    """
    Create a wired container.

    Args:
        responder: Replaces the HTTP responder (tests, offline mode)
        restoration_store: Replaces the configured restoration store
        seed_demo: Insert the demo accounts, defaults to SEED_DEMO_ACCOUNTS

    Returns:
        Container: Fresh container with its own store and session
    """
    setup_logger()

    container = Container()
    if responder is not None:
        container.responder.override(providers.Object(responder))
    if restoration_store is not None:
        container.restoration_store.override(providers.Object(restoration_store))

    if settings.SEED_DEMO_ACCOUNTS if seed_demo is None else seed_demo:
        seed_demo_accounts(container.credential_store())

    return container


def startup(container: Container) -> Optional[Session]:
    """Resume the persisted session, if any, once at application start."""
    logger.info(f"Starting {settings.SERVICE_NAME} v{settings.SERVICE_VERSION}")
    session = container.session_manager().restore_from_store()
    if session is None:
        logger.info("No session restored, showing login")
    return session


async def shutdown(container: Container) -> None:
    """Release the responder's connections at application exit."""
    await container.responder().close()
    logger.info(f"{settings.SERVICE_NAME} stopped")
