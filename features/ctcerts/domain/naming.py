"""テスト証明書のsubject名に関するルール"""
from __future__ import annotations

from features.ctcerts.domain.exceptions import InvalidBaseDomainError

# 設定で上書きされない場合のsubject CNのサフィックス。
# 先頭ラベルはシリアル番号から生成する。
DEFAULT_BASE_DOMAIN = ".woodpecker.testing.letsencrypt.org"

DOMAIN_SEPARATOR = "."
SERIAL_LABEL_BYTES = 5


def resolve_base_domain(base_domain: str | None) -> str:
    """空ならデフォルトを返し、それ以外は '.' 始まりであることを検証する"""

    if not base_domain:
        return DEFAULT_BASE_DOMAIN
    if not base_domain.startswith(DOMAIN_SEPARATOR):
        raise InvalidBaseDomainError(
            f"baseDomainは '{DOMAIN_SEPARATOR}' で始まる必要があります: {base_domain}"
        )
    return base_domain


def serial_label(serial: int) -> str:
    """シリアル番号のビッグエンディアン表現の先頭5バイトを16進文字列にする"""

    length = max(1, (serial.bit_length() + 7) // 8)
    return serial.to_bytes(length, "big")[:SERIAL_LABEL_BYTES].hex()


def subject_domain(serial: int, base_domain: str) -> str:
    return serial_label(serial) + base_domain


__all__ = [
    "DEFAULT_BASE_DOMAIN",
    "resolve_base_domain",
    "serial_label",
    "subject_domain",
]
