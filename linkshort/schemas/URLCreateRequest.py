from pydantic import BaseModel
from typing import Any, Optional

# Request DTOs
class URLCreateRequest(BaseModel):
    # Checked by the service so malformed input gets a 400 with a readable message
    url: Optional[Any] = None
