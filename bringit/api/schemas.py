"""
Pydantic schemas for API responses.
"""
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field


class SampleProduct(BaseModel):
    """Catalogue entry served without a database."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Product identifier")
    name: str = Field(..., description="Display name")
    price: float = Field(..., gt=0, description="Unit price in dollars")
    category: str = Field(..., description="Catalogue category")
    image: str = Field(..., description="Image path")
    in_stock: bool = Field(..., alias="inStock", description="Whether the product can be ordered")
    stock_quantity: int = Field(..., ge=0, alias="stockQuantity", description="Units on hand")


class Pagination(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    current_page: int = Field(..., alias="currentPage")
    total_pages: int = Field(..., alias="totalPages")
    total_count: int = Field(..., alias="totalCount")
    has_next_page: bool = Field(..., alias="hasNextPage")
    has_prev_page: bool = Field(..., alias="hasPrevPage")


class ProductPage(BaseModel):
    products: List[SampleProduct]
    pagination: Pagination


class ProductListResponse(BaseModel):
    """Response schema for the sample product listing."""

    success: bool = True
    data: ProductPage


class HealthResponse(BaseModel):
    """Response schema for the basic health endpoint."""

    status: str = Field(..., description="OK while the process is serving")
    message: str
    timestamp: str = Field(..., description="ISO 8601 timestamp")
    version: str
    environment: str
    database: str = Field(..., description="Connected or Disconnected")


class ApiTestResponse(BaseModel):
    success: bool = True
    message: str
    timestamp: str
    database: str
    endpoints: Dict[str, str]


class ApiDocsResponse(BaseModel):
    """Endpoint listing grouped by area."""

    title: str
    version: str
    description: str
    endpoints: Dict[str, Dict[str, str]]
