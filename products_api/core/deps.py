from fastapi import Depends, Request
from sqlalchemy import Engine

from products_api.api.controller import ProductController
from products_api.core.config import get_settings
from products_api.core.db import get_engine
from products_api.repositories import ProductStorageSQL
from products_api.storage import ProductStorage


def get_storage(engine: Engine = Depends(get_engine)) -> ProductStorage:
    return ProductStorageSQL(engine, null_zero_values=get_settings().null_zero_values)


def get_controller(storage: ProductStorage = Depends(get_storage)) -> ProductController:
    return ProductController(storage)


async def get_raw_body(request: Request) -> bytes:
    return await request.body()
