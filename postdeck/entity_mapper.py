from typing import Any

from pydantic import BaseModel
from pydantic import ValidationError as SchemaError

from postdeck.errors import InternalError


class EntityMapper[T: BaseModel]:
    """Composition class for entity mapping operations"""

    def __init__(self, entity_class: type[T]):
        self.entity_class = entity_class

    def map_row_to_entity(self, row: Any) -> T:
        """Map database row to entity; a row that does not fit the entity is a store fault"""
        try:
            return self.entity_class(**dict(row))
        except SchemaError as exc:
            raise InternalError(
                f"unexpected {self.entity_class.__name__} row: {exc}"
            ) from exc

    def map_rows_to_entities(self, rows: list[Any]) -> list[T]:
        return [self.map_row_to_entity(row) for row in rows]
