# app/domain/repositories/product_repo.py

from __future__ import annotations
from typing import List
from datetime import datetime, timezone
from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from app.domain.models.product import Product

class ProductRepo:
    """
    Product repository backed by the 'product' collection.
    Updates never upsert: a missing document is reported back to the caller, not created.
    """

    def __init__(self, db: AsyncIOMotorDatabase, collection_name: str = "product"):
        self.col = db[collection_name]

    async def create(self, *, name: str, image: str, price: float) -> Product:
        doc = {"name": name, "image": image, "price": price, "createdAt": datetime.now(timezone.utc)}
        res = await self.col.insert_one(doc)
        return Product.model_validate({"_id": res.inserted_id, **doc})

    async def list_all(self) -> List[Product]:
        # natural order, no pagination
        docs = await self.col.find({}).to_list(length=None)
        return [Product.model_validate(d) for d in docs]

    async def update(self, oid: ObjectId, *, name: str, image: str, price: float) -> Product | None:
        """
        Replace name/image/price and stamp updatedAt.
        Returns the submitted values (not re-read from the store), or None if nothing matched.
        """
        fields = {"name": name, "image": image, "price": price, "updatedAt": datetime.now(timezone.utc)}
        res = await self.col.update_one({"_id": oid}, {"$set": fields}, upsert=False)
        if res.matched_count == 0:
            return None
        return Product.model_validate({"_id": oid, **fields})

    async def delete(self, oid: ObjectId) -> bool:
        res = await self.col.delete_one({"_id": oid})
        return res.deleted_count > 0
