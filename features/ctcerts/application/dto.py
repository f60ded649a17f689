"""テスト証明書発行のDTO"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from cryptography import x509
from cryptography.hazmat.primitives.asymmetric.types import CertificateIssuerPrivateKeyTypes


@dataclass(slots=True)
class IssueTestCertificateInput:
    issuer_key: CertificateIssuerPrivateKeyTypes | None
    issuer_cert: x509.Certificate | None
    base_domain: str = ""
    window_start: datetime | None = None
    window_end: datetime | None = None
