"""
Storage boundary between route handlers and persistence.

`IStorage` is what routes and services depend on. `DatabaseStorage` maps each
method to exactly one SQL statement; `MemStorage` keeps rows in process
memory for local runs without Postgres (STORAGE_BACKEND=memory) and tests.
"""

from __future__ import annotations

import itertools
from abc import ABC, abstractmethod
from datetime import datetime, timezone

import asyncpg

from contact import repository as contact_repository
from contact.schemas import ContactMessage, InsertContactMessage
from core import settings
from users import repository as user_repository
from users.schemas import InsertUser, User


class DuplicateUsername(RuntimeError):
    pass


class IStorage(ABC):
    @abstractmethod
    async def get_user(self, user_id: int) -> User | None: ...

    @abstractmethod
    async def get_user_by_username(self, username: str) -> User | None: ...

    @abstractmethod
    async def create_user(self, user: InsertUser) -> User: ...

    @abstractmethod
    async def create_contact_message(self, message: InsertContactMessage) -> ContactMessage: ...

    @abstractmethod
    async def get_all_contact_messages(self) -> list[ContactMessage]: ...

    @abstractmethod
    async def get_contact_message_by_id(self, message_id: int) -> ContactMessage | None: ...


class DatabaseStorage(IStorage):
    async def get_user(self, user_id: int) -> User | None:
        row = await user_repository.get_user_by_id(user_id)
        return User.model_validate(row) if row is not None else None

    async def get_user_by_username(self, username: str) -> User | None:
        row = await user_repository.get_user_by_username(username)
        return User.model_validate(row) if row is not None else None

    async def create_user(self, user: InsertUser) -> User:
        try:
            row = await user_repository.create_user(username=user.username, password=user.password)
        except asyncpg.UniqueViolationError as exc:
            raise DuplicateUsername(f"Username {user.username!r} already exists.") from exc
        return User.model_validate(row)

    async def create_contact_message(self, message: InsertContactMessage) -> ContactMessage:
        row = await contact_repository.insert_contact_message(
            first_name=message.first_name,
            last_name=message.last_name,
            email=message.email,
            service_type=message.service_type,
            message=message.message,
        )
        return ContactMessage.model_validate(row)

    async def get_all_contact_messages(self) -> list[ContactMessage]:
        rows = await contact_repository.list_contact_messages()
        return [ContactMessage.model_validate(row) for row in rows]

    async def get_contact_message_by_id(self, message_id: int) -> ContactMessage | None:
        row = await contact_repository.get_contact_message(message_id)
        return ContactMessage.model_validate(row) if row is not None else None


class MemStorage(IStorage):
    def __init__(self) -> None:
        self._users: dict[int, User] = {}
        self._messages: dict[int, ContactMessage] = {}
        self._user_ids = itertools.count(1)
        self._message_ids = itertools.count(1)

    async def get_user(self, user_id: int) -> User | None:
        return self._users.get(user_id)

    async def get_user_by_username(self, username: str) -> User | None:
        for user in self._users.values():
            if user.username == username:
                return user
        return None

    async def create_user(self, user: InsertUser) -> User:
        # Mirrors the unique constraint on users.username.
        if await self.get_user_by_username(user.username) is not None:
            raise DuplicateUsername(f"Username {user.username!r} already exists.")
        created = User(id=next(self._user_ids), username=user.username, password=user.password)
        self._users[created.id] = created
        return created

    async def create_contact_message(self, message: InsertContactMessage) -> ContactMessage:
        created = ContactMessage(
            id=next(self._message_ids),
            first_name=message.first_name,
            last_name=message.last_name,
            email=message.email,
            service_type=message.service_type,
            message=message.message,
            created_at=datetime.now(timezone.utc),
        )
        self._messages[created.id] = created
        return created

    async def get_all_contact_messages(self) -> list[ContactMessage]:
        return sorted(
            self._messages.values(),
            key=lambda m: (m.created_at, m.id),
            reverse=True,
        )

    async def get_contact_message_by_id(self, message_id: int) -> ContactMessage | None:
        return self._messages.get(message_id)


_storage: IStorage | None = None


def uses_database() -> bool:
    return settings.storage_backend() != "memory"


def build_storage() -> IStorage:
    return DatabaseStorage() if uses_database() else MemStorage()


def get_storage() -> IStorage:
    """
    FastAPI dependency returning the process-wide storage.

    Tests swap it via `app.dependency_overrides[get_storage]`.
    """
    global _storage
    if _storage is None:
        _storage = build_storage()
    return _storage
