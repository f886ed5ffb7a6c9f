# Logging loguru avec masquage des PII
from .pii_filters import mask_keep_shape, redact_pii, redact_record
from .safe_logger import configure_logging

__all__ = ['configure_logging', 'mask_keep_shape', 'redact_pii', 'redact_record']
