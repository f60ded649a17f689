"""証明書の出力形式に関するユーティリティ"""
from __future__ import annotations

import base64
from typing import Any

from cryptography import x509
from cryptography.hazmat.primitives import serialization

from features.ctcerts.domain.models import CertificatePair


def certificate_to_pem(certificate: x509.Certificate) -> str:
    return certificate.public_bytes(serialization.Encoding.PEM).decode("utf-8")


def certificate_to_der_base64(certificate: x509.Certificate) -> str:
    """CTのadd-chain/add-pre-chainで送るbase64(DER)形式"""

    return base64.b64encode(certificate.public_bytes(serialization.Encoding.DER)).decode("ascii")


def pair_to_dict(pair: CertificatePair) -> dict[str, Any]:
    """証明書ペアをJSON化しやすい辞書に変換"""

    cert = pair.cert
    return {
        "serial": format(cert.serial_number, "x"),
        "commonName": cert.subject.get_attributes_for_oid(x509.oid.NameOID.COMMON_NAME)[0].value,
        "notBefore": cert.not_valid_before_utc.isoformat(),
        "notAfter": cert.not_valid_after_utc.isoformat(),
        "precert": certificate_to_der_base64(pair.precert),
        "cert": certificate_to_der_base64(pair.cert),
    }


__all__ = ["certificate_to_der_base64", "certificate_to_pem", "pair_to_dict"]
