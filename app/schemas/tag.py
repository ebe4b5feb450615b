from pydantic import BaseModel, Field

class TagBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=20)

class TagCreate(TagBase):
    pass

class TagResponse(TagBase):
    id: int
    organization_id: int

    class Config:
        from_attributes = True
