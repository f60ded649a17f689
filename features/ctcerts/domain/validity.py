"""テスト証明書の有効期間計算"""
from __future__ import annotations

from datetime import datetime, timedelta

from core.time import ensure_utc

# RFC 5280は終端の1秒を含めて数えるため、90日から1秒引いて
# 表現上の有効期間をちょうど90日にする。
VALIDITY_PERIOD = timedelta(days=90) - timedelta(seconds=1)

# テンポラルシャードの終端からどれだけ手前にNotAfterを置くか
SHARD_END_MARGIN = timedelta(hours=1)


def compute_validity_window(
    now: datetime,
    window_start: datetime | None = None,
    window_end: datetime | None = None,
    *,
    validity_period: timedelta = VALIDITY_PERIOD,
) -> tuple[datetime, datetime]:
    """NotBefore/NotAfterを計算する

    window_endがNoneなら現在時刻から有効期間を取る。window_endが指定され、
    NotAfterが[window_start, window_end]の外にある場合はwindow_endの1時間前を
    NotAfterとして期間を取り直す。window_startはこの判定でのみ参照し、
    Noneの場合は下限なしとして扱う。
    """

    not_before = ensure_utc(now)
    not_after = not_before + validity_period

    if window_end is not None:
        end = ensure_utc(window_end)
        start = ensure_utc(window_start) if window_start is not None else None
        if (start is not None and not_after < start) or not_after > end:
            not_after = end - SHARD_END_MARGIN
            not_before = not_after - validity_period

    # X.509の時刻は秒精度のため、テンプレートとパース結果を一致させる
    return not_before.replace(microsecond=0), not_after.replace(microsecond=0)


__all__ = ["SHARD_END_MARGIN", "VALIDITY_PERIOD", "compute_validity_window"]
