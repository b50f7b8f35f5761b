"""
CloudFront signed cookie generation and inspection.

CloudFront custom policies are signed with RSA-SHA1 (PKCS#1 v1.5) and both the
policy and the signature travel in the CloudFront-safe base64 alphabet, where
``+``, ``=`` and ``/`` become ``-``, ``_`` and ``~``.
"""

import base64
import binascii
import json
from typing import Dict, Optional

from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

POLICY_COOKIE = 'CloudFront-Policy'
SIGNATURE_COOKIE = 'CloudFront-Signature'
KEY_PAIR_ID_COOKIE = 'CloudFront-Key-Pair-Id'
SIGNED_COOKIE_NAMES = (POLICY_COOKIE, SIGNATURE_COOKIE, KEY_PAIR_ID_COOKIE)

_TO_CLOUDFRONT = str.maketrans('+=/', '-_~')
_FROM_CLOUDFRONT = str.maketrans('-_~', '+=/')


class InvalidPolicyError(ValueError):
    """Raised when a policy cookie cannot be decoded into an expiry."""


def cloudfront_b64encode(data: bytes) -> str:
    return base64.b64encode(data).decode('ascii').translate(_TO_CLOUDFRONT)


def cloudfront_b64decode(value: str) -> bytes:
    return base64.b64decode(value.translate(_FROM_CLOUDFRONT), validate=True)


def build_policy(resource: str, expire_time: int) -> str:
    """Build the canned-style custom policy JSON, without whitespace."""
    policy = {
        'Statement': [{
            'Resource': resource,
            'Condition': {
                'DateLessThan': {
                    'AWS:EpochTime': expire_time,
                },
            },
        }],
    }
    return json.dumps(policy, separators=(',', ':'))


def load_private_key(private_key_pem: str) -> rsa.RSAPrivateKey:
    """Load a PEM encoded, unencrypted RSA private key."""
    private_key = serialization.load_pem_private_key(private_key_pem.encode('utf-8'), password=None)
    if not isinstance(private_key, rsa.RSAPrivateKey):
        raise ValueError('CloudFront signing key must be an RSA key')
    return private_key


class CookieSigner:
    """Signs CloudFront custom policies with a cached RSA key."""

    def __init__(self, private_key_pem: str, key_pair_id: str):
        self.key_pair_id = key_pair_id
        self._private_key = load_private_key(private_key_pem)

    def sign(self, policy: str) -> str:
        signature = self._private_key.sign(policy.encode('utf-8'), padding.PKCS1v15(), hashes.SHA1())
        return cloudfront_b64encode(signature)

    def signed_cookies(self, resource: str, expire_time: int) -> Dict[str, str]:
        """
        Generate the three CloudFront cookies granting access until ``expire_time``.

        Args:
            resource: Resource URL pattern, ``*`` for everything behind the distribution
            expire_time: Epoch seconds after which CloudFront rejects the cookies

        Returns:
            Mapping of cookie name to value
        """
        policy = build_policy(resource, expire_time)
        return {
            POLICY_COOKIE: cloudfront_b64encode(policy.encode('utf-8')),
            SIGNATURE_COOKIE: self.sign(policy),
            KEY_PAIR_ID_COOKIE: self.key_pair_id,
        }


def policy_expire_time(encoded_policy: str) -> int:
    """
    Read the ``AWS:EpochTime`` expiry out of an encoded policy cookie.

    Raises:
        InvalidPolicyError: If the value is not a CloudFront policy with an integer expiry
    """
    try:
        policy = json.loads(cloudfront_b64decode(encoded_policy))
        expire_time = policy['Statement'][0]['Condition']['DateLessThan']['AWS:EpochTime']
    except (binascii.Error, UnicodeDecodeError, ValueError, KeyError, IndexError, TypeError) as e:
        raise InvalidPolicyError('Malformed CloudFront policy') from e

    if isinstance(expire_time, bool) or not isinstance(expire_time, int):
        raise InvalidPolicyError('Policy expiry is not an integer')
    return expire_time


def parse_cookie_header(header: Optional[str]) -> Dict[str, str]:
    """Split a ``Cookie`` request header into a name to value mapping."""
    cookies: Dict[str, str] = {}
    if not header:
        return cookies
    for pair in header.split(';'):
        name, sep, value = pair.strip().partition('=')
        if sep and name:
            cookies[name] = value
    return cookies
