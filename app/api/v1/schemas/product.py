# api/v1/schemas/product.py
from pydantic import BaseModel, StrictFloat, StrictInt
from typing import Optional, Union

class ProductIn(BaseModel):
    """
    Body of POST /api/products and PUT /api/products/{id}.
    Everything is optional at parse time so a missing field yields the route's own 400 message
    instead of a generic validation error.
    """
    name: Optional[str] = None
    image: Optional[str] = None
    # numbers only: true or "10" are rejected, not coerced
    price: Optional[Union[StrictInt, StrictFloat]] = None

    def is_complete(self) -> bool:
        # empty strings count as missing; a price of 0 does not
        return bool(self.name) and bool(self.image) and self.price is not None
