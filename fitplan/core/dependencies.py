import asyncio
import weakref
from datetime import datetime
from typing import Callable

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fitplan.core.db import get_db
from fitplan.repositories.profile_repository import ProfileRepository
from fitplan.repositories.progress_repository import ProgressRepository
from fitplan.services.catalog import StaticCatalog


class UserLockRegistry:
    """
    Один asyncio.Lock на пользователя: переходы одного пользователя выполняются
    строго по очереди, разные пользователи друг друга не блокируют.
    Замок живет, пока на него есть ссылки (удерживающий или ожидающий запрос),
    после этого запись исчезает из реестра сама.
    """

    def __init__(self):
        self._locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = weakref.WeakValueDictionary()

    def __len__(self) -> int:
        return len(self._locks)

    def lock_for(self, user_id: str) -> asyncio.Lock:
        lock = self._locks.get(user_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[user_id] = lock
        return lock


_catalog = StaticCatalog()
_user_locks = UserLockRegistry()


def get_catalog() -> StaticCatalog:
    return _catalog


def get_user_locks() -> UserLockRegistry:
    return _user_locks


def get_clock() -> Callable[[], datetime]:
    return datetime.utcnow


def get_profile_repository(db: AsyncSession = Depends(get_db)) -> ProfileRepository:
    """Фабрика репозитория, инжектируется в эндпоинты через Depends."""
    return ProfileRepository(db)


def get_progress_repository(db: AsyncSession = Depends(get_db)) -> ProgressRepository:
    return ProgressRepository(db)
