from fastapi import APIRouter, Depends, status

from products_api.api.controller import ProductController, parse_product_id
from products_api.core.deps import get_controller, get_raw_body
from products_api.schemas import ProductRead, ProductReadWithId, ProductRequest, ResponseBody

router = APIRouter(prefix="/products", tags=["products"])

# Update validates its body by hand, after the product lookup.
_update_body_doc = {
    "requestBody": {
        "required": True,
        "content": {"application/json": {"schema": ProductRequest.model_json_schema()}},
    }
}


@router.get("/{product_id}", response_model=ResponseBody[ProductRead])
def http_get_product(product_id: str, controller: ProductController = Depends(get_controller)):
    return controller.get_one(product_id)


@router.post("", response_model=ResponseBody[ProductReadWithId], status_code=status.HTTP_201_CREATED)
@router.post(
    "/",
    response_model=ResponseBody[ProductReadWithId],
    status_code=status.HTTP_201_CREATED,
    include_in_schema=False,
)
def http_store_product(payload: ProductRequest, controller: ProductController = Depends(get_controller)):
    return controller.store(payload)


@router.api_route(
    "/{product_id}",
    methods=["PUT", "PATCH"],
    response_model=ResponseBody[ProductReadWithId],
    openapi_extra=_update_body_doc,
)
def http_update_product(
    product_id: str,
    body: bytes = Depends(get_raw_body),
    controller: ProductController = Depends(get_controller),
):
    return controller.update(product_id, body)


@router.delete("/{product_id}", response_model=ResponseBody[None])
def http_delete_product(product_id: str, controller: ProductController = Depends(get_controller)):
    return controller.delete(product_id)


@router.api_route("/", methods=["GET", "PUT", "PATCH", "DELETE"], include_in_schema=False)
def http_missing_product_id():
    # /products/ with an empty id segment
    parse_product_id(None)
