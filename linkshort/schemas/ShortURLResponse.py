from pydantic import BaseModel

# Response DTOs
class ShortURLResponse(BaseModel):
    short_url: str
    code: str
    long_url: str
