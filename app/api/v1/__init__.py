from app.api.v1 import organizations, products, public, rfqs, tokens, tracking

__all__ = [
    "organizations",
    "products",
    "public",
    "tokens",
    "rfqs",
    "tracking",
]
