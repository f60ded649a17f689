from __future__ import annotations

from datetime import timedelta

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from features.ctcerts.domain.exceptions import IssuerLoadError
from features.ctcerts.infrastructure.issuer_store import (
    create_test_issuer,
    export_issuer_pem,
    load_issuer_material,
)


def test_create_test_issuer_is_a_p256_ca(fake_clock):
    material = create_test_issuer(common_name="Unit Test CA", clock=fake_clock)

    cert = material.certificate
    assert isinstance(material.private_key, ec.EllipticCurvePrivateKey)
    assert isinstance(material.private_key.curve, ec.SECP256R1)
    assert cert.issuer == cert.subject
    assert cert.extensions.get_extension_for_class(x509.BasicConstraints).value.ca is True
    assert cert.extensions.get_extension_for_class(x509.KeyUsage).value.key_cert_sign is True
    assert cert.not_valid_before_utc == fake_clock.now() - timedelta(days=1)
    assert cert.serial_number > 0


def _write_issuer(tmp_path, material):
    private_pem, cert_pem = export_issuer_pem(material)
    key_path = tmp_path / "issuer.key"
    cert_path = tmp_path / "issuer.pem"
    key_path.write_text(private_pem)
    cert_path.write_text(cert_pem)
    return key_path, cert_path


def test_load_issuer_material_round_trips_pem(tmp_path, issuer):
    key_path, cert_path = _write_issuer(tmp_path, issuer)

    loaded = load_issuer_material(key_path, cert_path)

    assert loaded.certificate == issuer.certificate
    assert (
        loaded.private_key.private_numbers().private_value
        == issuer.private_key.private_numbers().private_value
    )


def test_load_issuer_material_accepts_der(tmp_path, issuer):
    key_path = tmp_path / "issuer.der.key"
    cert_path = tmp_path / "issuer.der"
    key_path.write_bytes(
        issuer.private_key.private_bytes(
            serialization.Encoding.DER,
            serialization.PrivateFormat.PKCS8,
            serialization.NoEncryption(),
        )
    )
    cert_path.write_bytes(issuer.certificate.public_bytes(serialization.Encoding.DER))

    loaded = load_issuer_material(key_path, cert_path)
    assert loaded.certificate == issuer.certificate


def test_load_issuer_material_missing_file(tmp_path, issuer):
    _, cert_path = _write_issuer(tmp_path, issuer)
    with pytest.raises(IssuerLoadError):
        load_issuer_material(tmp_path / "nope.key", cert_path)


def test_load_issuer_material_empty_file(tmp_path, issuer):
    key_path, cert_path = _write_issuer(tmp_path, issuer)
    key_path.write_text("")
    with pytest.raises(IssuerLoadError):
        load_issuer_material(key_path, cert_path)


def test_load_issuer_material_garbage(tmp_path, issuer):
    key_path, cert_path = _write_issuer(tmp_path, issuer)
    cert_path.write_text("-----BEGIN CERTIFICATE-----\nnot base64\n-----END CERTIFICATE-----\n")
    with pytest.raises(IssuerLoadError):
        load_issuer_material(key_path, cert_path)


def test_load_issuer_material_rejects_mismatched_key(tmp_path, issuer, fake_clock):
    other = create_test_issuer(clock=fake_clock)
    (tmp_path / "other").mkdir()
    (tmp_path / "mine").mkdir()
    key_path, _ = _write_issuer(tmp_path / "other", other)
    _, cert_path = _write_issuer(tmp_path / "mine", issuer)

    with pytest.raises(IssuerLoadError):
        load_issuer_material(key_path, cert_path)
