"""Response models for the HTTP API."""

from typing import Any, Dict, List

from pydantic import BaseModel


class StatusResponse(BaseModel):
    message: str
    loadedProducts: int


class ProductListResponse(BaseModel):
    success: bool = True
    count: int
    # Catalog records are echoed as loaded, so their fields are open-ended.
    products: List[Dict[str, Any]]


class CategoryLabel(BaseModel):
    id: str
    name: str


class CategoryListResponse(BaseModel):
    success: bool = True
    categories: List[CategoryLabel]


class SearchResponse(BaseModel):
    success: bool = True
    query: str
    count: int
    total: int
    results: List[Dict[str, Any]]


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    results: List[Dict[str, Any]] = []


class ReloadResponse(BaseModel):
    success: bool = True
    loadedProducts: int
