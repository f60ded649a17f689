from unittest.mock import patch

import pytest
from cryptography.hazmat.primitives.asymmetric import ec

from features.ctcerts.domain.exceptions import RandomSourceError
from features.ctcerts.infrastructure import randomness
from features.ctcerts.infrastructure.randomness import MAX_SERIAL, rand_key, rand_serial


def test_rand_serial_is_within_range():
    for _ in range(50):
        serial = rand_serial()
        assert 0 <= serial < MAX_SERIAL


def test_rand_serial_is_fresh():
    assert len({rand_serial() for _ in range(20)}) == 20


def test_rand_serial_wraps_entropy_failure():
    with patch.object(randomness.secrets, "randbelow", side_effect=OSError("no entropy")):
        with pytest.raises(RandomSourceError) as excinfo:
            rand_serial()
    assert isinstance(excinfo.value.__cause__, OSError)


def test_rand_key_is_p256():
    key = rand_key()
    assert isinstance(key, ec.EllipticCurvePrivateKey)
    assert isinstance(key.curve, ec.SECP256R1)


def test_rand_key_wraps_generation_failure():
    with patch.object(randomness.ec, "generate_private_key", side_effect=RuntimeError("broken")):
        with pytest.raises(RandomSourceError):
            rand_key()
