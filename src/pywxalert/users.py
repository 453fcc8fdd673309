"""User store boundary.

The scheduler only reads users. Account storage lives elsewhere; these
stores adapt whatever holds the records.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Iterable
from pathlib import Path
from typing import Any, Protocol

from pydantic import ValidationError as PydanticValidationError

from pywxalert.exceptions import WxConfigError
from pywxalert.models.user import UserRecord


class UserStore(Protocol):
    async def find_all(self) -> list[UserRecord]:
        ...


class InMemoryUserStore:
    """Fixed set of users, for embedding and tests."""

    def __init__(self, users: Iterable[UserRecord | dict[str, Any]] = ()) -> None:
        self._users = [user if isinstance(user, UserRecord) else UserRecord.model_validate(user) for user in users]

    async def find_all(self) -> list[UserRecord]:
        return list(self._users)

    def replace(self, users: Iterable[UserRecord]) -> None:
        self._users = list(users)


class JsonFileUserStore:
    """Users read from a JSON array on every call.

    Re-reading per tick picks up edits without restarting the scheduler.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    async def find_all(self) -> list[UserRecord]:
        text = await asyncio.to_thread(self._path.read_text, encoding="utf-8")
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise WxConfigError(f"{self._path} is not valid JSON: {exc}") from exc
        if not isinstance(data, list):
            raise WxConfigError(f"{self._path} must contain a JSON array of users")
        try:
            return [UserRecord.model_validate(item) for item in data]
        except PydanticValidationError as exc:
            raise WxConfigError(f"{self._path} has an invalid user record: {exc}") from exc
