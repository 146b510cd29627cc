# catalog/schemas/access.py
from pydantic import BaseModel, Field


class GrantAccessIn(BaseModel):
    email: str = Field(min_length=3, max_length=255)


class AccessResultOut(BaseModel):
    success: bool
    message: str
