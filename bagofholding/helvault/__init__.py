from bagofholding.helvault.database import open_helvault
from bagofholding.helvault.identifiers import (
    decode_binder_id,
    encode_binder_id,
    normalize_binder_id,
)

__all__ = [
    "decode_binder_id",
    "encode_binder_id",
    "normalize_binder_id",
    "open_helvault",
]
