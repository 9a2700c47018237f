"""
Document fingerprinting.

The fingerprint of a rendered document is the SHA-256 of its canonical
JSON bytes, produced by ``app.utils.canonical.canonical_json_bytes``.
It is returned in the ``X-Document-Hash`` header and shown in the HTML
preview toolbar.
"""

import hashlib
from typing import Union


def compute_document_hash(canonical_bytes: Union[bytes, bytearray]) -> str:
    """Return ``SHA-256:<hex digest>`` for already canonicalized bytes."""
    if not isinstance(canonical_bytes, (bytes, bytearray)):
        raise TypeError(
            f"cannot fingerprint {type(canonical_bytes).__name__}; "
            "pass canonical_json_bytes(document)"
        )

    return "SHA-256:" + hashlib.sha256(canonical_bytes).hexdigest()
