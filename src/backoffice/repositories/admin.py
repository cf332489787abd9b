# Backoffice/src/backoffice/repositories/admin.py
# @ai-rules:
# 1. [Singleton row]: admin_settings holds exactly one row (id=1). init_schema seeds it on first boot.
"""Storage for the admin password hash."""

from abc import ABC, abstractmethod
from typing import Optional

from .postgres import PostgresRepository


class AdminRepository(ABC):

    @abstractmethod
    def get_password_hash(self) -> Optional[str]: ...

    @abstractmethod
    def set_password_hash(self, password_hash: str) -> None: ...


class PostgresAdminRepository(PostgresRepository, AdminRepository):

    def get_password_hash(self) -> Optional[str]:
        with self._cursor() as cur:
            cur.execute("SELECT password_hash FROM admin_settings WHERE id = 1")
            row = cur.fetchone()
            return row[0] if row else None

    def set_password_hash(self, password_hash: str) -> None:
        with self._cursor() as cur:
            cur.execute(
                "UPDATE admin_settings SET password_hash = %s WHERE id = 1",
                (password_hash,)
            )


class MemoryAdminRepository(AdminRepository):

    def __init__(self, password_hash: Optional[str] = None):
        self._password_hash = password_hash

    def get_password_hash(self) -> Optional[str]:
        return self._password_hash

    def set_password_hash(self, password_hash: str) -> None:
        self._password_hash = password_hash
