"""シリアル番号と鍵ペアの乱数生成"""
from __future__ import annotations

import secrets

from cryptography.hazmat.primitives.asymmetric import ec

from features.ctcerts.domain.exceptions import RandomSourceError

# シリアルは [0, 2^63-1) から一様に選ぶ
MAX_SERIAL = 2**63 - 1


def rand_serial() -> int:
    """証明書シリアル用の乱数を生成"""

    try:
        return secrets.randbelow(MAX_SERIAL)
    except (OSError, NotImplementedError) as exc:
        raise RandomSourceError(f"シリアル番号の生成に失敗しました: {exc}") from exc


def rand_key() -> ec.EllipticCurvePrivateKey:
    """P-256のECDSA鍵ペアを生成"""

    try:
        return ec.generate_private_key(ec.SECP256R1())
    except Exception as exc:  # noqa: BLE001 - cryptographyからの例外のラップ
        raise RandomSourceError(f"鍵ペアの生成に失敗しました: {exc}") from exc


__all__ = ["MAX_SERIAL", "rand_key", "rand_serial"]
