from pydantic import BaseModel, Field

class OrganizationCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)

class ActiveOrganizationUpdate(BaseModel):
    organization_id: int

class OrganizationResponse(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True
