from pydantic import BaseModel
from typing import Optional

class GenerateScenariosRequest(BaseModel):
    # Presence is checked by the route so a missing field is a 400, not a 422
    topic: Optional[str] = None
    count: Optional[int] = None
    difficulty: Optional[str] = None
    format: Optional[str] = None
    language: Optional[str] = None
