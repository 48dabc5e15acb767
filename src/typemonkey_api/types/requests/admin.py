from pydantic import BaseModel

RESET_CONFIRMATION = "DELETE_ALL_DATA"


class ResetRequest(BaseModel):
    confirm: str | None = None
