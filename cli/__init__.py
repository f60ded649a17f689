"""CLI サブパッケージ初期化モジュール."""

from __future__ import annotations

import sys
from pathlib import Path

# `python cli/main.py` で直接実行した場合でも `core` / `features` を
# 解決できるようにプロジェクトルートを Python パスへ追加する。
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

__all__ = ["_PROJECT_ROOT"]
