import importlib
import logging

import pytest

from app.routers import admin, auth
from app.services import quota_service
from app.services.firebase import firebase_auth, firebase_config
from app.services.quota_service import QuotaService
from app.utils.logger import logger as app_logger

# The package re-exports the service instance under the submodule name
abuse_module = importlib.import_module("app.services.abuse_prevention.abuse_prevention_service")


class _Collector(logging.Handler):
    def __init__(self):
        super().__init__(level=logging.DEBUG)
        self.messages = []

    def handle(self, record):
        self.messages.append(record.getMessage())
        return True


@pytest.fixture
def collected():
    handler = _Collector()
    previous = app_logger.level
    app_logger.addHandler(handler)
    app_logger.setLevel(logging.DEBUG)
    yield handler.messages
    app_logger.removeHandler(handler)
    app_logger.setLevel(previous)


@pytest.mark.parametrize(
    "module", [quota_service, abuse_module, auth, admin, firebase_auth, firebase_config]
)
def test_module_loggers_share_application_handlers(module):
    assert module.logger.name.startswith(f"{app_logger.name}.")


async def test_quota_denial_reaches_application_handlers(db, make_user, collected):
    user = await make_user(is_banned=True)

    await QuotaService().check_and_reserve(user.id, db)

    assert f"Search denied for user {user.id}: banned" in collected
