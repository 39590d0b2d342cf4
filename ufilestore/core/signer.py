"""Request signing for the UFile REST API.

Every request carries ``Authorization: UCloud <public_key>:<token>`` where the
token is an HMAC-SHA1 over a five line canonical string. The Content-MD5 and
Date lines are always sent empty.
"""

import base64
import hashlib
import hmac

from ufilestore.core.const import AUTH_SCHEME
from ufilestore.core.models import StorageCredential


def canonical_string(method: str, content_type: str, bucket: str, key: str) -> str:
    """Build the string that is signed for a request."""
    return "\n".join([method, "", content_type, "", f"/{bucket}/{key}"])


def sign(
    private_key: str, method: str, content_type: str, bucket: str, key: str
) -> str:
    """Compute the request token.

    Args:
        private_key: Secret half of the UCloud key pair.
        method: HTTP method of the request.
        content_type: Content-Type header value of the request.
        bucket: Bucket the request targets.
        key: Object key the request targets.

    Returns:
        Base64 encoded HMAC-SHA1 digest of the canonical string.
    """
    data = canonical_string(method, content_type, bucket, key)
    digest = hmac.new(
        private_key.encode("utf-8"), data.encode("utf-8"), hashlib.sha1
    ).digest()
    return base64.b64encode(digest).decode("ascii")


def authorization_header(
    credential: StorageCredential,
    method: str,
    content_type: str,
    bucket: str,
    key: str,
) -> str:
    """Return the ``Authorization`` header value for a request."""
    token = sign(credential.private_key, method, content_type, bucket, key)
    return f"{AUTH_SCHEME} {credential.public_key}:{token}"
