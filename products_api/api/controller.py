from __future__ import annotations

import re
from dataclasses import replace
from typing import Optional

from fastapi import status
from pydantic import ValidationError

from products_api.api.errors import (
    MSG_INTERNAL,
    MSG_INVALID_JSON,
    MSG_INVALID_PATH_PARAM,
    MSG_NOT_FOUND,
    MSG_NOT_UNIQUE,
    MSG_PARAM_MUST_BE_INT,
    APIError,
)
from products_api.core.logging import get_logger
from products_api.schemas import ProductRead, ProductReadWithId, ProductRequest, ResponseBody
from products_api.storage import (
    Product,
    ProductNotFoundError,
    ProductNotUniqueError,
    ProductStorage,
    ProductStorageError,
)

logger = get_logger(__name__)

# ASCII digits only; \d would also match e.g. Arabic-Indic digits.
_INT_RE = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

MSG_SUCCESS = "success"


def parse_product_id(raw: Optional[str]) -> int:
    """
    Parse the id path segment.

    Raises APIError(400) when the segment is missing, is not an integer, or
    does not fit a signed 64-bit integer.
    """
    if raw is None or not raw.strip():
        raise APIError(status.HTTP_400_BAD_REQUEST, MSG_INVALID_PATH_PARAM)
    if not _INT_RE.fullmatch(raw):
        raise APIError(status.HTTP_400_BAD_REQUEST, MSG_PARAM_MUST_BE_INT)
    value = int(raw)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise APIError(status.HTTP_400_BAD_REQUEST, MSG_PARAM_MUST_BE_INT)
    return value


def parse_product_body(raw: bytes) -> ProductRequest:
    """Validate a raw JSON body; anything unusable is a 400 "invalid json"."""
    try:
        return ProductRequest.model_validate_json(raw)
    except ValidationError as e:
        raise APIError(status.HTTP_400_BAD_REQUEST, MSG_INVALID_JSON) from e


def _storage_error(exc: ProductStorageError) -> APIError:
    if isinstance(exc, ProductNotFoundError):
        return APIError(status.HTTP_404_NOT_FOUND, MSG_NOT_FOUND)
    if isinstance(exc, ProductNotUniqueError):
        return APIError(status.HTTP_400_BAD_REQUEST, MSG_NOT_UNIQUE)
    return APIError(status.HTTP_500_INTERNAL_SERVER_ERROR, MSG_INTERNAL)


def _with_id(product: Product) -> ProductReadWithId:
    return ProductReadWithId(
        id=product.id,
        name=product.name,
        type=product.type,
        count=product.count,
        price=product.price,
    )


class ProductController:
    """
    HTTP actions for products.

    Holds nothing but the storage it was built with; every method maps
    storage errors to APIError and returns the success envelope.
    """

    def __init__(self, storage: ProductStorage) -> None:
        self.storage = storage

    def get_one(self, raw_id: Optional[str]) -> ResponseBody[ProductRead]:
        product_id = parse_product_id(raw_id)

        try:
            product = self.storage.fetch_by_id(product_id)
        except ProductStorageError as e:
            raise _storage_error(e) from e

        # No id in this shape.
        data = ProductRead(name=product.name, type=product.type, count=product.count, price=product.price)
        return ResponseBody[ProductRead](message=MSG_SUCCESS, data=data)

    def store(self, payload: ProductRequest) -> ResponseBody[ProductReadWithId]:
        product = Product(**payload.supplied())

        try:
            self.storage.insert(product)
        except ProductStorageError as e:
            raise _storage_error(e) from e

        logger.info("product id=%s created", product.id)
        return ResponseBody[ProductReadWithId](message=MSG_SUCCESS, data=_with_id(product))

    def update(self, raw_id: Optional[str], body: bytes) -> ResponseBody[ProductReadWithId]:
        product_id = parse_product_id(raw_id)

        try:
            current = self.storage.fetch_by_id(product_id)
        except ProductStorageError as e:
            raise _storage_error(e) from e

        # The body only matters once the product is known to exist.
        payload = parse_product_body(body)

        # Not atomic: a concurrent writer between fetch and update can be overwritten.
        product = replace(current, **payload.supplied())
        product.id = product_id

        try:
            self.storage.update(product)
        except ProductStorageError as e:
            raise _storage_error(e) from e

        logger.info("product id=%s updated", product.id)
        return ResponseBody[ProductReadWithId](message=MSG_SUCCESS, data=_with_id(product))

    def delete(self, raw_id: Optional[str]) -> ResponseBody[None]:
        product_id = parse_product_id(raw_id)

        try:
            self.storage.delete(product_id)
        except ProductStorageError as e:
            raise _storage_error(e) from e

        logger.info("product id=%s deleted", product_id)
        return ResponseBody[None](message=MSG_SUCCESS, data=None)
