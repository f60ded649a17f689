"""鍵や証明書周りの共通関数"""
from __future__ import annotations

from typing import Iterable

from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ed448, ed25519
from cryptography.hazmat.primitives.asymmetric.types import (
    CertificateIssuerPrivateKeyTypes,
    CertificatePublicKeyTypes,
)

from features.ctcerts.domain.exceptions import EncodingError


_KEY_USAGE_ATTRIBUTES: dict[str, str] = {
    "digitalSignature": "digital_signature",
    "contentCommitment": "content_commitment",
    "keyEncipherment": "key_encipherment",
    "dataEncipherment": "data_encipherment",
    "keyAgreement": "key_agreement",
    "keyCertSign": "key_cert_sign",
    "crlSign": "crl_sign",
    "encipherOnly": "encipher_only",
    "decipherOnly": "decipher_only",
}


def build_key_usage_extension(usages: Iterable[str] | None) -> x509.KeyUsage | None:
    """keyUsage名のリストからKeyUsageエクステンションを生成"""

    if usages is None:
        return None

    usage_set = {item for item in usages if item}
    if not usage_set:
        return None

    params = {attr: False for attr in _KEY_USAGE_ATTRIBUTES.values()}
    for usage in usage_set:
        attr = _KEY_USAGE_ATTRIBUTES.get(usage)
        if attr is None:
            raise EncodingError(f"未対応のkeyUsageが指定されました: {usage}")
        params[attr] = True

    if params["encipher_only"] or params["decipher_only"]:
        params["key_agreement"] = True

    return x509.KeyUsage(**params)


def signature_hash_for(private_key: CertificateIssuerPrivateKeyTypes) -> hashes.HashAlgorithm | None:
    """発行者鍵の種類に応じた署名ハッシュ。EdDSAはハッシュを指定しない"""

    if isinstance(private_key, (ed25519.Ed25519PrivateKey, ed448.Ed448PrivateKey)):
        return None
    return hashes.SHA256()


def public_key_der(key: CertificatePublicKeyTypes) -> bytes:
    return key.public_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )


def serialize_private_key(key: CertificateIssuerPrivateKeyTypes) -> str:
    return (
        key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )
        .decode("utf-8")
    )


__all__ = [
    "build_key_usage_extension",
    "public_key_der",
    "serialize_private_key",
    "signature_hash_for",
]
