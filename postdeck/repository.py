"""Repository class"""

from typing import Any

from pydantic import BaseModel, Field

from postdeck.database_operations import DatabaseOperations
from postdeck.entity_mapper import EntityMapper
from postdeck.query_builder import QueryBuilder


class RepositoryConfig(BaseModel):
    """Configuration options for Repository"""

    db_schema: str | None = Field(default=None, description="Database schema name")
    db_name: str = Field(default="default", description="Name of the registered pool")


class Repository[T: BaseModel, U: BaseModel]:
    """Table access by integer primary key.

    Methods here must run inside a transaction context (see
    ``DatabaseManager.transaction``); subclasses decide where transactions begin.

    Type Parameters:
        T: Entity read from the table
        U: Update model type
    """

    def __init__(
        self,
        entity_class: type[T],
        update_class: type[U],
        table_name: str,
        config: RepositoryConfig | None = None,
    ):
        if not table_name:
            raise ValueError("table_name is required")

        self.entity_class = entity_class
        self.update_class = update_class
        self.table_name = table_name
        self.config = config or RepositoryConfig()
        self._qualified_table_name = (
            f"{self.config.db_schema}.{table_name}"
            if self.config.db_schema
            else table_name
        )

        # Composition: Inject dependencies
        self.db_ops = DatabaseOperations()
        self.entity_mapper = EntityMapper(entity_class)

    @property
    def db_name(self) -> str:
        return self.config.db_name

    def query(self) -> QueryBuilder:
        """Start a new SELECT on this repository's table"""
        return QueryBuilder(self._qualified_table_name)

    async def fetch(self, builder: QueryBuilder) -> list[T]:
        query, params = builder.build()
        rows = await self.db_ops.fetch_all(query, params)
        return self.entity_mapper.map_rows_to_entities(rows)

    async def fetch_first(self, builder: QueryBuilder) -> T | None:
        query, params = builder.limit(1).build()
        row = await self.db_ops.fetch_one(query, params)
        if row is None:
            return None
        return self.entity_mapper.map_row_to_entity(row)

    async def find_by_id(self, entity_id: int) -> T | None:
        return await self.fetch_first(self.query().where("id", entity_id))

    async def insert(self, fields: dict[str, Any]) -> int:
        """Insert one row and return the id the store assigned to it"""
        columns = ", ".join(fields.keys())
        values = list(fields.values())
        placeholders = ", ".join([f"${i + 1}" for i in range(len(values))])

        return await self.db_ops.fetch_value(
            f"INSERT INTO {self._qualified_table_name} ({columns}) VALUES ({placeholders}) RETURNING id",
            values,
        )

    async def update(self, entity_id: int, update_data: U) -> T | None:
        """Update the fields explicitly set on ``update_data``; None when no row matches"""
        update_dict = update_data.model_dump(exclude_unset=True, exclude_none=True)
        if not update_dict:
            return await self.find_by_id(entity_id)

        set_clause = ", ".join(
            [f"{k} = ${i + 2}" for i, k in enumerate(update_dict.keys())]
        )
        values = [entity_id, *update_dict.values()]

        row = await self.db_ops.fetch_one(
            f"UPDATE {self._qualified_table_name} SET {set_clause} WHERE id = $1 RETURNING *",
            values,
        )
        if row is None:
            return None
        return self.entity_mapper.map_row_to_entity(row)

    async def delete(self, entity_id: int) -> bool:
        """Hard delete by id; False when no row matched"""
        result = await self.db_ops.execute_query(
            f"DELETE FROM {self._qualified_table_name} WHERE id = $1", [entity_id]
        )
        return result != "DELETE 0"

    async def count(self) -> int:
        query, params = self.query().select("COUNT(*)").build()
        result = await self.db_ops.fetch_value(query, params)
        return result or 0
