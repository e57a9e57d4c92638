from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field
from pymongo.errors import PyMongoError

from skillhub.errors import StoreError


class MongoModel(BaseModel):
    id: UUID = Field(alias="_id", serialization_alias="id", default_factory=uuid4)

    model_config = ConfigDict(
        populate_by_name=True,
        arbitrary_types_allowed=True,
        json_schema_serialization_defaults_required=True,
    )

    def to_mongo(self) -> dict[str, Any]:
        """Convert the model to a dictionary for MongoDB storage with _id field."""
        data = self.model_dump()
        if "id" in data:
            data["_id"] = data.pop("id")  # Rename id → _id for MongoDB
        return data


@contextmanager
def store_errors(operation: str) -> Iterator[None]:
    """Translate driver failures into StoreError, keeping the driver error as the cause."""
    try:
        yield
    except PyMongoError as e:
        raise StoreError(f"{operation} failed: {e}") from e
