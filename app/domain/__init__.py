from app.domain.access_log_operations import access_log_ops
from app.domain.access_token_operations import access_token_ops
from app.domain.organization_operations import organization_ops
from app.domain.product_operations import product_ops
from app.domain.rfq_operations import rfq_ops

__all__ = [
    "access_log_ops",
    "access_token_ops",
    "organization_ops",
    "product_ops",
    "rfq_ops",
]
