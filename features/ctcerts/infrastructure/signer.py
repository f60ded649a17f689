"""証明書テンプレートの署名処理

署名はこのモジュールの :func:`issue_certificate` だけで行う。
"""
from __future__ import annotations

import logging

from cryptography import x509
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.types import (
    CertificateIssuerPrivateKeyTypes,
    CertificatePublicKeyTypes,
)
from cryptography.x509.oid import AuthorityInformationAccessOID, NameOID

from features.ctcerts.domain.exceptions import (
    CTCertificateError,
    EncodingError,
    MissingArgumentError,
    ParseError,
    SigningError,
)
from features.ctcerts.domain.models import CertificateTemplate

from .key_utils import build_key_usage_extension, signature_hash_for

logger = logging.getLogger(__name__)


def issue_certificate(
    subject_public_key: CertificatePublicKeyTypes | None,
    issuer_private_key: CertificateIssuerPrivateKeyTypes | None,
    issuer_certificate: x509.Certificate | None,
    template: CertificateTemplate | None,
) -> x509.Certificate:
    """発行者の鍵と証明書でテンプレートに署名し、DERから再パースした証明書を返す

    引数の欠落はsubject鍵、発行者鍵、発行者証明書、テンプレートの順に検査する。
    """

    if subject_public_key is None:
        raise MissingArgumentError("subject_public_key")
    if issuer_private_key is None:
        raise MissingArgumentError("issuer_private_key")
    if issuer_certificate is None:
        raise MissingArgumentError("issuer_certificate")
    if template is None:
        raise MissingArgumentError("template")

    try:
        builder = _builder_from_template(subject_public_key, issuer_certificate, template)
    except CTCertificateError:
        raise
    except (ValueError, TypeError) as exc:
        raise EncodingError(f"証明書テンプレートの組み立てに失敗しました: {exc}") from exc

    try:
        signed = builder.sign(
            private_key=issuer_private_key,
            algorithm=signature_hash_for(issuer_private_key),
        )
    except Exception as exc:  # noqa: BLE001 - cryptographyからの例外のラップ
        raise SigningError(str(exc)) from exc

    try:
        der = signed.public_bytes(serialization.Encoding.DER)
    except ValueError as exc:
        raise EncodingError(f"証明書のDERエンコードに失敗しました: {exc}") from exc

    try:
        certificate = x509.load_der_x509_certificate(der)
    except ValueError as exc:
        raise ParseError(f"署名済み証明書の再パースに失敗しました: {exc}") from exc

    logger.debug(
        "certificate signed",
        extra={
            "event": "ctcerts.issue_certificate",
            "serial": format(certificate.serial_number, "x"),
            "subject": template.common_name,
        },
    )
    return certificate


def _builder_from_template(
    subject_public_key: CertificatePublicKeyTypes,
    issuer_certificate: x509.Certificate,
    template: CertificateTemplate,
) -> x509.CertificateBuilder:
    builder = (
        x509.CertificateBuilder()
        .subject_name(x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, template.common_name)]))
        .issuer_name(issuer_certificate.subject)
        .public_key(subject_public_key)
        .serial_number(template.serial_number)
        .not_valid_before(template.not_before)
        .not_valid_after(template.not_after)
    )

    if template.basic_constraints_valid:
        builder = builder.add_extension(
            x509.BasicConstraints(ca=template.is_ca, path_length=None), critical=True
        )

    key_usage_extension = build_key_usage_extension(template.key_usage)
    if key_usage_extension is not None:
        builder = builder.add_extension(key_usage_extension, critical=True)

    if template.extended_key_usage:
        builder = builder.add_extension(
            x509.ExtendedKeyUsage(template.extended_key_usage), critical=False
        )

    if template.dns_names:
        builder = builder.add_extension(
            x509.SubjectAlternativeName([x509.DNSName(name) for name in template.dns_names]),
            critical=False,
        )

    authority_key_id = _authority_key_identifier(issuer_certificate)
    if authority_key_id is not None:
        builder = builder.add_extension(authority_key_id, critical=False)

    if template.issuing_certificate_urls:
        builder = builder.add_extension(
            x509.AuthorityInformationAccess(
                [
                    x509.AccessDescription(
                        AuthorityInformationAccessOID.CA_ISSUERS,
                        x509.UniformResourceIdentifier(url),
                    )
                    for url in template.issuing_certificate_urls
                ]
            ),
            critical=False,
        )

    if template.crl_distribution_points:
        builder = builder.add_extension(
            x509.CRLDistributionPoints(
                [
                    x509.DistributionPoint(
                        full_name=[x509.UniformResourceIdentifier(url)],
                        relative_name=None,
                        reasons=None,
                        crl_issuer=None,
                    )
                    for url in template.crl_distribution_points
                ]
            ),
            critical=False,
        )

    for extension in template.extra_extensions:
        builder = builder.add_extension(extension.value, critical=extension.critical)

    return builder


def _authority_key_identifier(issuer_certificate: x509.Certificate) -> x509.AuthorityKeyIdentifier | None:
    try:
        ski = issuer_certificate.extensions.get_extension_for_class(x509.SubjectKeyIdentifier)
    except x509.ExtensionNotFound:
        return None
    return x509.AuthorityKeyIdentifier.from_issuer_subject_key_identifier(ski.value)


__all__ = ["issue_certificate"]
