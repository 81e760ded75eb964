from bson import ObjectId
from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Any

from app.domain.models.ids import DocumentId

class StoredDocument(BaseModel):
    """
    Base for documents read back from Mongo.

    Collections are schema-flexible, so stored values are not type-checked on read:
    whatever the document holds is handed back to the client. Field names are camelCase
    on the wire (`createdAt`), `_id` is exposed as a hex string, and unknown fields are
    carried through untouched.
    """
    id: DocumentId = Field(alias="_id")
    created_at: Any = None
    updated_at: Any = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    def to_public(self) -> dict:
        # only keys the document actually had; stored nulls stay null
        raw = self.model_dump(by_alias=True, exclude_unset=True)
        return jsonable_encoder(raw, custom_encoder={ObjectId: str})

class Product(StoredDocument):
    name: Any = None
    image: Any = None
    price: Any = None
