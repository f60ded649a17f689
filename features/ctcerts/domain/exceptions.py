"""テスト証明書発行で利用する例外定義"""
from __future__ import annotations


class CTCertificateError(Exception):
    """テスト証明書関連の基本例外"""


class MissingArgumentError(CTCertificateError):
    """必須引数が渡されなかった場合の例外"""

    def __init__(self, argument: str) -> None:
        super().__init__(f"cannot issue certificate without {argument}")
        self.argument = argument


class InvalidBaseDomainError(CTCertificateError):
    """ベースドメインが '.' で始まっていない場合の例外"""


class RandomSourceError(CTCertificateError):
    """乱数源(シリアル・鍵生成)の失敗"""


class EncodingError(CTCertificateError):
    """証明書構造の組み立て・DERエンコードの失敗"""


class SigningError(CTCertificateError):
    """証明書署名時の例外"""


class ParseError(CTCertificateError):
    """署名済みDERの再パースに失敗した場合の例外"""


class IssuerLoadError(CTCertificateError):
    """発行者の鍵・証明書の読み込みに失敗した場合の例外"""
