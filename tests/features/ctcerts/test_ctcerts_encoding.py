import base64

from cryptography import x509
from cryptography.hazmat.primitives import serialization

from features.ctcerts.application.use_cases import issue_test_certificate
from features.ctcerts.infrastructure.encoding import (
    certificate_to_der_base64,
    certificate_to_pem,
    pair_to_dict,
)


def test_certificate_to_pem(issuer):
    pem = certificate_to_pem(issuer.certificate)
    assert pem.startswith("-----BEGIN CERTIFICATE-----")
    assert x509.load_pem_x509_certificate(pem.encode("ascii")) == issuer.certificate


def test_certificate_to_der_base64(issuer):
    encoded = certificate_to_der_base64(issuer.certificate)
    assert base64.b64decode(encoded) == issuer.certificate.public_bytes(serialization.Encoding.DER)


def test_pair_to_dict(issuer, fake_clock):
    pair = issue_test_certificate(".ct.example.com", issuer.private_key, issuer.certificate, fake_clock)

    payload = pair_to_dict(pair)

    assert payload["serial"] == format(pair.cert.serial_number, "x")
    assert payload["commonName"].endswith(".ct.example.com")
    assert payload["notBefore"] == fake_clock.now().isoformat()
    assert payload["precert"] == certificate_to_der_base64(pair.precert)
    assert payload["cert"] == certificate_to_der_base64(pair.cert)
