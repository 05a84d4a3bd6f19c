from pydantic import BaseModel, Field


class QueryCreate(BaseModel):
    query: str = Field(min_length=1)


class QueryResponse(BaseModel):
    response: str = Field(min_length=1)
