"""発行者(テスト用CA)の鍵と証明書の管理ロジック"""
from __future__ import annotations

from datetime import timedelta
from pathlib import Path

from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.types import CertificateIssuerPrivateKeyTypes
from cryptography.x509.oid import NameOID

from core.time import Clock, SystemClock
from features.ctcerts.domain.exceptions import IssuerLoadError
from features.ctcerts.domain.models import IssuerMaterial

from .key_utils import public_key_der, serialize_private_key
from .randomness import rand_serial

DEFAULT_ISSUER_COMMON_NAME = "CT Test Certificate Issuer"
ISSUER_VALIDITY = timedelta(days=3650)


def create_test_issuer(
    common_name: str = DEFAULT_ISSUER_COMMON_NAME,
    clock: Clock | None = None,
) -> IssuerMaterial:
    """自己署名のP-256テスト用CAを生成"""

    now = (clock or SystemClock()).now()
    private_key = ec.generate_private_key(ec.SECP256R1())
    subject = x509.Name(
        [
            x509.NameAttribute(NameOID.ORGANIZATION_NAME, "CT Test"),
            x509.NameAttribute(NameOID.COMMON_NAME, common_name),
        ]
    )
    certificate = (
        x509.CertificateBuilder()
        .subject_name(subject)
        .issuer_name(subject)
        .public_key(private_key.public_key())
        .serial_number(rand_serial() + 1)
        .not_valid_before(now - timedelta(days=1))
        .not_valid_after(now + ISSUER_VALIDITY)
        .add_extension(x509.BasicConstraints(ca=True, path_length=None), critical=True)
        .add_extension(
            x509.KeyUsage(
                digital_signature=True,
                content_commitment=False,
                key_encipherment=False,
                data_encipherment=False,
                key_agreement=False,
                key_cert_sign=True,
                crl_sign=True,
                encipher_only=False,
                decipher_only=False,
            ),
            critical=True,
        )
        .add_extension(
            x509.SubjectKeyIdentifier.from_public_key(private_key.public_key()),
            critical=False,
        )
        .sign(private_key, hashes.SHA256())
    )
    return IssuerMaterial(private_key=private_key, certificate=certificate)


def export_issuer_pem(material: IssuerMaterial) -> tuple[str, str]:
    """発行者の秘密鍵と証明書をPEM文字列で返す"""

    private_pem = serialize_private_key(material.private_key)
    cert_pem = material.certificate.public_bytes(serialization.Encoding.PEM).decode("utf-8")
    return private_pem, cert_pem


def load_issuer_material(
    key_path: str | Path,
    cert_path: str | Path,
    password: bytes | None = None,
) -> IssuerMaterial:
    """PEMまたはDERの鍵・証明書ファイルから発行者を読み込む"""

    key_bytes = _read_file(key_path, "発行者鍵")
    cert_bytes = _read_file(cert_path, "発行者証明書")

    private_key = _load_private_key(key_bytes, password)
    certificate = _load_certificate(cert_bytes)

    if public_key_der(private_key.public_key()) != public_key_der(certificate.public_key()):
        raise IssuerLoadError("発行者鍵と発行者証明書の公開鍵が一致しません")

    return IssuerMaterial(private_key=private_key, certificate=certificate)


def _read_file(path: str | Path, label: str) -> bytes:
    file_path = Path(path)
    if not file_path.is_file():
        raise IssuerLoadError(f"{label}のファイルが見つかりません: {file_path}")
    try:
        content = file_path.read_bytes()
    except OSError as exc:
        raise IssuerLoadError(f"{label}の読み込みに失敗しました: {file_path}") from exc
    if not content.strip():
        raise IssuerLoadError(f"{label}のファイルが空です: {file_path}")
    return content


def _load_private_key(data: bytes, password: bytes | None) -> CertificateIssuerPrivateKeyTypes:
    loader = (
        serialization.load_pem_private_key
        if b"-----BEGIN" in data
        else serialization.load_der_private_key
    )
    try:
        key = loader(data, password=password)
    except (ValueError, TypeError) as exc:
        raise IssuerLoadError(f"発行者鍵の解析に失敗しました: {exc}") from exc
    if not hasattr(key, "sign") or not hasattr(key, "public_key"):
        raise IssuerLoadError("署名に使用できない鍵タイプです")
    return key


def _load_certificate(data: bytes) -> x509.Certificate:
    loader = (
        x509.load_pem_x509_certificate
        if b"-----BEGIN" in data
        else x509.load_der_x509_certificate
    )
    try:
        return loader(data)
    except ValueError as exc:
        raise IssuerLoadError(f"発行者証明書の解析に失敗しました: {exc}") from exc


__all__ = [
    "DEFAULT_ISSUER_COMMON_NAME",
    "create_test_issuer",
    "export_issuer_pem",
    "load_issuer_material",
]
