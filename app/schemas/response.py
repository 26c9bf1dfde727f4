from pydantic import BaseModel
from typing import Optional, Any, Dict

class ApiResponse(BaseModel):
    """
    Standard response envelope. `code` is 0 on success.
    """
    code: int
    message: str
    data: Optional[Any] = None


def success_response(message: str, data: Optional[Any] = None) -> Dict[str, Any]:
    """
    Builds a success body; `data` is left out entirely when there is none.
    """
    body = ApiResponse(code=0, message=message, data=data).model_dump()
    if data is None:
        body.pop("data")
    return body
