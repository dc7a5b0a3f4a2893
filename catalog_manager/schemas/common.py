from pydantic import AfterValidator, BaseModel, Field
from typing import Annotated


def require_text(value: str) -> str:
    """Reject strings that are empty once surrounding whitespace is removed"""
    value = value.strip()
    if not value:
        raise ValueError("must not be blank")
    return value


# Text field that must carry something other than whitespace
NonBlankStr = Annotated[str, AfterValidator(require_text)]


class MessageResponse(BaseModel):
    message: str = Field(..., description="Human-readable outcome", examples=["Supplier deleted successfully"])
