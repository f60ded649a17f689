"""テスト証明書ペア発行のユースケース"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from cryptography import x509
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.types import (
    CertificateIssuerPrivateKeyTypes,
    CertificatePublicKeyTypes,
)

from core.time import Clock, SystemClock
from features.ctcerts.domain.models import (
    CertificatePair,
    CertificateTemplate,
    LeafVariant,
    TemplateExtension,
)
from features.ctcerts.domain.naming import resolve_base_domain, subject_domain
from features.ctcerts.domain.validity import compute_validity_window
from features.ctcerts.infrastructure.randomness import rand_key, rand_serial
from features.ctcerts.infrastructure.signer import issue_certificate

from .dto import IssueTestCertificateInput

logger = logging.getLogger(__name__)

# RFC 6962 3.1のCTポイズン拡張(OID 1.3.6.1.4.1.11129.2.4.3, 値はDER NULL)
CT_POISON_EXTENSION = TemplateExtension(value=x509.PrecertPoison(), critical=True)

Signer = Callable[
    [CertificatePublicKeyTypes, CertificateIssuerPrivateKeyTypes, x509.Certificate, CertificateTemplate],
    x509.Certificate,
]


def build_leaf_template(
    variant: LeafVariant,
    *,
    domain: str,
    base_domain: str,
    serial: int,
    not_before: datetime,
    not_after: datetime,
) -> CertificateTemplate:
    """プレ証明書・最終証明書で共通のテンプレートを組み立てる"""

    template = CertificateTemplate(
        common_name=domain,
        dns_names=[domain],
        serial_number=serial,
        not_before=not_before,
        not_after=not_after,
        issuing_certificate_urls=[f"http://issuer{base_domain}"],
        crl_distribution_points=[f"http://crls{base_domain}"],
    )
    if variant.is_precert:
        template.extra_extensions = [CT_POISON_EXTENSION]
    return template


class IssueTestCertificateUseCase:
    """CTログ投入用のプレ証明書と最終証明書を発行するユースケース

    subject CNはシリアル番号から生成したラベルとベースドメインを連結したもの。
    有効期間は90日で、window_endが指定された場合はそのシャードに収まるよう
    調整する。ブラウザ等から信頼されるルートではないが、ログ監視側で特別扱いが
    必要にならないよう通常のリーフ証明書と同じ拡張を持たせる。
    """

    def __init__(
        self,
        clock: Clock | None = None,
        *,
        key_factory: Callable[[], ec.EllipticCurvePrivateKey] = rand_key,
        serial_factory: Callable[[], int] = rand_serial,
        signer: Signer = issue_certificate,
    ) -> None:
        self._clock = clock or SystemClock()
        self._key_factory = key_factory
        self._serial_factory = serial_factory
        self._signer = signer

    def execute(self, payload: IssueTestCertificateInput) -> CertificatePair:
        base_domain = resolve_base_domain(payload.base_domain)

        subject_key = self._key_factory()
        serial = self._serial_factory()

        not_before, not_after = compute_validity_window(
            self._clock.now(), payload.window_start, payload.window_end
        )
        domain = subject_domain(serial, base_domain)

        def issue(variant: LeafVariant) -> x509.Certificate:
            template = build_leaf_template(
                variant,
                domain=domain,
                base_domain=base_domain,
                serial=serial,
                not_before=not_before,
                not_after=not_after,
            )
            return self._signer(
                subject_key.public_key(), payload.issuer_key, payload.issuer_cert, template
            )

        precert = issue(LeafVariant.PRECERT)
        cert = issue(LeafVariant.FINAL)

        logger.info(
            "test certificate pair issued",
            extra={
                "event": "ctcerts.issue_test_certificate",
                "serial": format(serial, "x"),
                "domain": domain,
                "notBefore": not_before.isoformat(),
                "notAfter": not_after.isoformat(),
            },
        )
        return CertificatePair(precert=precert, cert=cert)


def issue_test_certificate(
    base_domain: str,
    issuer_key: CertificateIssuerPrivateKeyTypes | None,
    issuer_cert: x509.Certificate | None,
    clock: Clock,
    window_start: datetime | None = None,
    window_end: datetime | None = None,
) -> CertificatePair:
    """:class:`IssueTestCertificateUseCase` の関数版"""

    payload = IssueTestCertificateInput(
        issuer_key=issuer_key,
        issuer_cert=issuer_cert,
        base_domain=base_domain,
        window_start=window_start,
        window_end=window_end,
    )
    return IssueTestCertificateUseCase(clock).execute(payload)


__all__ = [
    "CT_POISON_EXTENSION",
    "IssueTestCertificateUseCase",
    "build_leaf_template",
    "issue_test_certificate",
]
