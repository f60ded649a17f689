"""テスト証明書発行で利用するドメインモデル"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import NamedTuple

from cryptography import x509
from cryptography.hazmat.primitives.asymmetric.types import CertificateIssuerPrivateKeyTypes
from cryptography.x509.oid import ExtendedKeyUsageOID


class LeafVariant(str, Enum):
    """発行するリーフ証明書の種別"""

    PRECERT = "precert"
    FINAL = "final"

    @property
    def is_precert(self) -> bool:
        return self is LeafVariant.PRECERT


@dataclass(slots=True)
class TemplateExtension:
    """テンプレートに追加する任意のエクステンション"""

    value: x509.ExtensionType
    critical: bool = False


@dataclass(slots=True)
class CertificateTemplate:
    """署名前の証明書フィールド一式

    issuerは署名時に発行者証明書のsubjectから決まるため保持しない。
    """

    common_name: str
    serial_number: int
    not_before: datetime
    not_after: datetime
    dns_names: list[str] = field(default_factory=list)
    key_usage: list[str] = field(default_factory=lambda: ["digitalSignature"])
    extended_key_usage: list[x509.ObjectIdentifier] = field(
        default_factory=lambda: [ExtendedKeyUsageOID.SERVER_AUTH, ExtendedKeyUsageOID.CLIENT_AUTH]
    )
    basic_constraints_valid: bool = True
    is_ca: bool = False
    issuing_certificate_urls: list[str] = field(default_factory=list)
    crl_distribution_points: list[str] = field(default_factory=list)
    extra_extensions: list[TemplateExtension] = field(default_factory=list)


@dataclass(slots=True)
class IssuerMaterial:
    """発行者の秘密鍵と証明書"""

    private_key: CertificateIssuerPrivateKeyTypes
    certificate: x509.Certificate


class CertificatePair(NamedTuple):
    """プレ証明書と対応する最終証明書の組"""

    precert: x509.Certificate
    cert: x509.Certificate
