from pydantic import BaseModel
from datetime import datetime

# Stored entity: code and long_url never change once assigned
class URLMapping(BaseModel):
    code: str
    long_url: str
    created_at: datetime
    hit_count: int = 0

    model_config = {"from_attributes": True, "frozen": True}
