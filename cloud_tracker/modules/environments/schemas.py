from pydantic import BaseModel


class EnvironmentResponse(BaseModel):
    id: str
    name: str
    slug: str
    sort_order: int = 0

    class Config:
        from_attributes = True
