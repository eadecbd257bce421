"""Pydantic schemas for company comparison."""

from pydantic import BaseModel


class CompareRequest(BaseModel):
    companies: list[str]
