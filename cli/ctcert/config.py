from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

from dotenv import load_dotenv

from core.time import parse_isoformat

# Load .env at import time so CLI and tests pick it up
load_dotenv()


# ---------------------------------------------------------------------------
# helpers


def _mask(val: str, keep: int = 2) -> str:
    if not val:
        return ""
    if len(val) <= keep * 2:
        return "*" * len(val)
    return f"{val[:keep]}***{val[-keep:]}"


def _read_time(raw: str) -> Optional[datetime]:
    if not raw:
        return None
    return parse_isoformat(raw)


# ---------------------------------------------------------------------------


@dataclass
class CTCertConfig:
    base_domain: str = ""
    issuer_key_path: str = ""
    issuer_cert_path: str = ""
    issuer_key_password: str = ""
    window_start: str = ""
    window_end: str = ""
    output_dir: str = "."

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> "CTCertConfig":
        env = os.environ if env is None else env
        return CTCertConfig(
            base_domain=env.get("CTCERT_BASE_DOMAIN", "").strip(),
            issuer_key_path=env.get("CTCERT_ISSUER_KEY_PATH", "").strip(),
            issuer_cert_path=env.get("CTCERT_ISSUER_CERT_PATH", "").strip(),
            issuer_key_password=env.get("CTCERT_ISSUER_KEY_PASSWORD", ""),
            window_start=env.get("CTCERT_WINDOW_START", "").strip(),
            window_end=env.get("CTCERT_WINDOW_END", "").strip(),
            output_dir=env.get("CTCERT_OUTPUT_DIR", "").strip() or ".",
        )

    # ------------------------------------------------------------------
    def window(self) -> Tuple[Optional[datetime], Optional[datetime]]:
        """Parsed shard window; raises ``ValueError`` on malformed timestamps."""
        return _read_time(self.window_start), _read_time(self.window_end)

    def password_bytes(self) -> Optional[bytes]:
        return self.issuer_key_password.encode("utf-8") if self.issuer_key_password else None

    # ------------------------------------------------------------------
    def validate(self) -> Tuple[List[str], List[str]]:
        """Returns ``(warnings, errors)``"""
        warns: List[str] = []
        errs: List[str] = []

        for key, path in [
            ("CTCERT_ISSUER_KEY_PATH", self.issuer_key_path),
            ("CTCERT_ISSUER_CERT_PATH", self.issuer_cert_path),
        ]:
            if not path:
                errs.append(f"{key}: not set")
            elif not Path(path).is_file():
                errs.append(f"{key}: file does not exist: {path}")

        if self.base_domain and not self.base_domain.startswith("."):
            errs.append(f"CTCERT_BASE_DOMAIN: must start with '.' (current: {self.base_domain})")
        if not self.base_domain:
            warns.append("CTCERT_BASE_DOMAIN: not set, the built-in default suffix is used")

        parsed: Dict[str, Optional[datetime]] = {}
        for key, raw in [
            ("CTCERT_WINDOW_START", self.window_start),
            ("CTCERT_WINDOW_END", self.window_end),
        ]:
            try:
                parsed[key] = _read_time(raw)
            except ValueError:
                errs.append(f"{key}: could not parse as ISO 8601 timestamp ({raw})")

        start = parsed.get("CTCERT_WINDOW_START")
        end = parsed.get("CTCERT_WINDOW_END")
        if start and end and start >= end:
            errs.append("CTCERT_WINDOW_START: must be earlier than CTCERT_WINDOW_END")
        if start and not end and "CTCERT_WINDOW_END" in parsed:
            warns.append("CTCERT_WINDOW_START: ignored unless CTCERT_WINDOW_END is also set")

        return warns, errs

    # ------------------------------------------------------------------
    def masked(self) -> Dict[str, Any]:
        return {
            "base_domain": self.base_domain,
            "issuer_key_path": self.issuer_key_path,
            "issuer_cert_path": self.issuer_cert_path,
            "issuer_key_password": _mask(self.issuer_key_password),
            "window_start": self.window_start,
            "window_end": self.window_end,
            "output_dir": self.output_dir,
        }
