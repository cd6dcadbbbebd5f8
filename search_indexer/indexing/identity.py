"""
Deterministic document identity.

    id = hex(HMAC-SHA256(secret, "<bucket>:<key>"))[:127]

The same (bucket, key) always maps to the same CloudSearch document id, so
a delete notification removes exactly what an earlier add created and a
redelivered add overwrites instead of duplicating. The bucket is part of
the MAC input, so equal keys in different buckets never collide.

The secret is configuration, not a credential.
"""

from __future__ import annotations

import hashlib
import hmac

# CloudSearch document id limit
MAX_ID_LENGTH = 127

DEFAULT_IDENTITY_SECRET = "s3-cloudsearch-indexer"


def identify(bucket: str, key: str, secret: str = DEFAULT_IDENTITY_SECRET) -> str:
    message = f"{bucket}:{key}".encode("utf-8")
    digest = hmac.new(secret.encode("utf-8"), message, hashlib.sha256).hexdigest()
    return digest[:MAX_ID_LENGTH]
