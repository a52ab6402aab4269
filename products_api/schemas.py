from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")

# products.count is a 32-bit INTEGER column.
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1


class ProductRequest(BaseModel):
    # NaN / Infinity are not JSON even though json.loads accepts them.
    model_config = ConfigDict(allow_inf_nan=False)

    # Absent and null fields mean "not supplied".
    name: Optional[str] = None
    type: Optional[str] = None
    count: Optional[int] = Field(default=None, ge=INT32_MIN, le=INT32_MAX)
    price: Optional[float] = None

    def supplied(self) -> dict:
        return {k: v for k, v in self.model_dump(exclude_unset=True).items() if v is not None}


class ProductRead(BaseModel):
    name: str
    type: str
    count: int
    price: float


class ProductReadWithId(ProductRead):
    id: int


class ResponseBody(BaseModel, Generic[T]):
    message: str
    data: Optional[T] = None
    error: bool = False
