# app/api/deps.py
from fastapi import Depends, Request
from motor.motor_asyncio import AsyncIOMotorDatabase
from app.core.config import Settings, get_settings
from app.core.security import TokenVerifier
from app.domain.repositories.product_repo import ProductRepo
from app.domain.repositories.moderator_repo import ModeratorRepo

# Dependency for injecting the MongoDB database into endpoints/services
async def mongo_db(request: Request) -> AsyncIOMotorDatabase:
    # The store lives on app.state for the lifetime of the process (see core/lifespan.py)
    return request.app.state.mongo.db

# Dependency for injecting the configured bearer-token verifier
def token_verifier(request: Request) -> TokenVerifier:
    return request.app.state.token_verifier

def product_repo(db = Depends(mongo_db), settings: Settings = Depends(get_settings)) -> ProductRepo:
    return ProductRepo(db, settings.PRODUCT_COLLECTION)

def moderator_repo(db = Depends(mongo_db), settings: Settings = Depends(get_settings)) -> ModeratorRepo:
    return ModeratorRepo(db, settings.MODERATOR_COLLECTION)
