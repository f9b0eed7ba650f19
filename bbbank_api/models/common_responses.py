from pydantic import BaseModel


class DetailResponse(BaseModel):
    detail: str


class InfoResponse(BaseModel):
    title: str
    version: str
    docs_url: str
