from pydantic import BaseModel


class StatusCreate(BaseModel):
    label: str

    class Config:
        extra = "forbid"
        strict = True


class StatusOut(StatusCreate):
    id: int

    class Config:
        from_attributes = True
        strict = False
