"""
Base schemas for all models.
"""

from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """
    Base for response schemas.

    Features:
        - Validate on attribute assignment
        - Serialize with camelCase aliases where a field defines one
    """
    model_config = ConfigDict(
        populate_by_name=True,
        validate_assignment=True
    )

    def to_result(self) -> dict:
        """JSON-RPC result payload (aliases applied)."""
        return self.model_dump(by_alias=True)


class RpcParams(BaseModel):
    """
    Base for JSON-RPC params.

    Features:
        - Accept both the wire names (productId) and the Python names
        - Ignore unknown params, as the gateway always has
        - Numeric names/SKUs are accepted as strings
        - Strings are NOT trimmed: identifiers are cache keys and must stay exact
    """
    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
        coerce_numbers_to_str=True
    )
