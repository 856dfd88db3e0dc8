"""Response schema for the hello endpoint."""

from pydantic import BaseModel, ConfigDict, Field


class HelloResponse(BaseModel):
    """Payload returned by GET /hello, serialized as {"Message": ...}."""

    model_config = ConfigDict(frozen=True)

    message: str = Field(serialization_alias="Message")

    def is_valid(self) -> bool:
        return bool(self.message)
