"""
CityInfo API: Dependency Injection
==================================

What:  FastAPI dependency providers for the repository and the mail service.
How:   Everything is read from app.state, which create_app() fills:
           store_backend    "memory" | "database"
           cities_store     CitiesDataStore (memory backend)
           session_factory  async_sessionmaker (database backend)
           mail_service     MailService
       A fresh app (e.g. one per test) therefore gets a fresh store.
"""

from typing import AsyncGenerator

from fastapi import Request

from cityinfo.database import session_scope
from cityinfo.services.mail_base import MailService
from cityinfo.services.memory_repository import InMemoryCityInfoRepository
from cityinfo.services.repository_base import CityInfoRepository
from cityinfo.services.sql_repository import SqlAlchemyCityInfoRepository


async def get_city_info_repository(
    request: Request,
) -> AsyncGenerator[CityInfoRepository, None]:
    """
    Repository for the configured store, scoped to one request.

    The database variant opens one session per request and closes it when
    the response is done.
    """
    state = request.app.state
    if state.store_backend == "memory":
        yield InMemoryCityInfoRepository(state.cities_store)
        return

    async with session_scope(state.session_factory) as session:
        yield SqlAlchemyCityInfoRepository(session)


def get_mail_service(request: Request) -> MailService:
    return request.app.state.mail_service
