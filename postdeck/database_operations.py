from typing import Any

import asyncpg

from postdeck.db_context import DRIVER_ERRORS, DatabaseManager
from postdeck.errors import InternalError


class DatabaseOperations:
    """Composition class for database operations.

    Every driver failure is re-raised as InternalError; nothing is retried here.
    """

    @staticmethod
    def get_connection() -> asyncpg.Connection:
        """Get the current database connection from context"""
        conn = DatabaseManager.get_current_connection()
        if not conn:
            raise ValueError(
                "No active transaction found. Repository methods must be called within a transaction context."
            )
        return conn

    async def fetch_all(self, query: str, params: list[Any]) -> list[Any]:
        """Execute query and fetch all rows"""
        conn = self.get_connection()
        DatabaseManager.log_query(query, params)
        try:
            return await conn.fetch(query, *params)
        except DRIVER_ERRORS as exc:
            raise InternalError(str(exc)) from exc

    async def fetch_one(self, query: str, params: list[Any]) -> Any:
        """Execute a query and fetch one row"""
        conn = self.get_connection()
        DatabaseManager.log_query(query, params)
        try:
            return await conn.fetchrow(query, *params)
        except DRIVER_ERRORS as exc:
            raise InternalError(str(exc)) from exc

    async def fetch_value(self, query: str, params: list[Any]) -> Any:
        """Execute query and fetch single value"""
        conn = self.get_connection()
        DatabaseManager.log_query(query, params)
        try:
            return await conn.fetchval(query, *params)
        except DRIVER_ERRORS as exc:
            raise InternalError(str(exc)) from exc

    async def execute_query(self, query: str, params: list[Any]) -> str:
        """Execute query and return the status tag, e.g. ``DELETE 1``"""
        conn = self.get_connection()
        DatabaseManager.log_query(query, params)
        try:
            return await conn.execute(query, *params)
        except DRIVER_ERRORS as exc:
            raise InternalError(str(exc)) from exc
