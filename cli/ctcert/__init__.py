"""ctcert: CTログ投入用テスト証明書CLI"""

__version__ = "0.1.0"
