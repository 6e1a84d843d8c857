"""
Schemas module - Request/Response schemas for API endpoints.

Everything lives in marketplace.schemas.schemas:
- Request schemas (what API accepts)
- Response schemas (what API returns)
"""
