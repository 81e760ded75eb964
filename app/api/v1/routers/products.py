# app/api/v1/routers/products.py

from fastapi import APIRouter, Depends, HTTPException
from pydantic import ValidationError
from pymongo.errors import PyMongoError
from typing import Optional

from app.api.deps import product_repo
from app.api.v1.schemas.product import ProductIn
from app.domain.models.ids import parse_object_id
from app.domain.repositories.product_repo import ProductRepo

import logging
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products", tags=["products"])

MISSING_FIELDS = "All fields (name, image, price) are required"

def _object_id(product_id: str):
    oid = parse_object_id(product_id)
    if oid is None:
        raise HTTPException(status_code=400, detail="Invalid product id")
    return oid

@router.post("", status_code=201, summary="Add a product")
async def create_product(body: Optional[ProductIn] = None, repo: ProductRepo = Depends(product_repo)):
    body = body or ProductIn()
    if not body.is_complete():
        raise HTTPException(status_code=400, detail=MISSING_FIELDS)
    try:
        product = await repo.create(name=body.name, image=body.image, price=body.price)
    except PyMongoError as e:
        logger.exception("Error adding product")
        raise HTTPException(status_code=500, detail=f"Failed to add product: {e}")
    logger.info("Product created id=%s", product.id)
    return {"message": "Product added successfully", "product": product.to_public()}

@router.get("", summary="List all products")
async def list_products(repo: ProductRepo = Depends(product_repo)):
    try:
        products = await repo.list_all()
    except (PyMongoError, ValidationError):
        logger.exception("Error fetching products")
        raise HTTPException(status_code=500, detail="Failed to fetch products")
    return [p.to_public() for p in products]

@router.put("/{product_id}", summary="Replace a product's name, image and price")
async def update_product(
    product_id: str,
    body: Optional[ProductIn] = None,
    repo: ProductRepo = Depends(product_repo),
):
    body = body or ProductIn()
    if not body.is_complete():
        raise HTTPException(status_code=400, detail=MISSING_FIELDS)
    oid = _object_id(product_id)
    try:
        product = await repo.update(oid, name=body.name, image=body.image, price=body.price)
    except PyMongoError as e:
        logger.exception("Error updating product id=%s", product_id)
        raise HTTPException(status_code=500, detail=f"Failed to update product: {e}")
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    logger.info("Product updated id=%s", product_id)
    return {"message": "Product updated successfully", "product": product.to_public()}

@router.delete("/{product_id}", summary="Delete a product")
async def delete_product(product_id: str, repo: ProductRepo = Depends(product_repo)):
    oid = _object_id(product_id)
    try:
        deleted = await repo.delete(oid)
    except PyMongoError as e:
        logger.exception("Error deleting product id=%s", product_id)
        raise HTTPException(status_code=500, detail=f"Failed to delete product: {e}")
    if not deleted:
        raise HTTPException(status_code=404, detail="Product not found")
    logger.info("Product deleted id=%s", product_id)
    return {"message": "Product deleted successfully"}
