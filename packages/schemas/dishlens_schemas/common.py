"""Shared base for models that travel over the DishLens REST API."""

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """
    Base for API data contracts.

    The API speaks camelCase JSON; Python code uses snake_case attributes.
    Either spelling is accepted on input, and ``to_wire`` always emits the
    camelCase form. Unknown fields are ignored so newer API versions don't
    break older clients.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="ignore",
    )

    def to_wire(self, *, exclude_unset: bool = False) -> dict[str, Any]:
        """
        Serialize to the JSON-compatible camelCase shape the API expects.

        PATCH bodies pass ``exclude_unset=True`` so only fields the caller
        actually set are sent.
        """
        return self.model_dump(mode="json", by_alias=True, exclude_unset=exclude_unset)
