from pydantic import BaseModel


class UserCreate(BaseModel):
    name: str
    email: str
    active: bool

    class Config:
        extra = "forbid"
        strict = True


class UserOut(UserCreate):
    id: int

    class Config:
        from_attributes = True
        strict = False
