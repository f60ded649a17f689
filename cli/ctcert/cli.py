import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from core.time import SystemClock, parse_isoformat
from features.ctcerts.application.use_cases import issue_test_certificate
from features.ctcerts.domain.exceptions import CTCertificateError
from features.ctcerts.infrastructure.encoding import certificate_to_pem, pair_to_dict
from features.ctcerts.infrastructure.issuer_store import (
    DEFAULT_ISSUER_COMMON_NAME,
    create_test_issuer,
    export_issuer_pem,
    load_issuer_material,
)

from . import __version__
from .config import CTCertConfig


console = Console()
app = typer.Typer(
    name="ctcert",
    help="Issue precertificate/certificate pairs for Certificate Transparency log testing",
    no_args_is_help=True,
    add_completion=False,
)

# ---------------------------------------------------------------------------
# sub-app: config
config_app = typer.Typer(name="config", help="Show and validate configuration")
app.add_typer(config_app, name="config")

# sub-app: issuer
issuer_app = typer.Typer(name="issuer", help="Manage the test issuer")
app.add_typer(issuer_app, name="issuer")


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=lambda v: (_print_version() if v else None),
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _print_version() -> None:
    console.print(f"[bold]ctcert[/] version {__version__}")
    raise typer.Exit(code=0)


def _fail(message: str) -> None:
    console.print(f"[red]ERROR[/] {message}")
    raise typer.Exit(code=1)


@config_app.command("show", help="Display settings loaded from environment variables")
def config_show() -> None:
    cfg = CTCertConfig.from_env()
    table = Table(title="ctcert Config (masked)")
    table.add_column("Key", style="bold")
    table.add_column("Value")

    for k, v in cfg.masked().items():
        table.add_row(k, str(v))
    console.print(table)


@config_app.command("check", help="Validate settings and show errors/warnings")
def config_check() -> None:
    warns, errs = CTCertConfig.from_env().validate()
    if warns:
        console.print("[yellow]WARN[/] " + " | ".join(warns))
    if errs:
        console.print("[red]ERROR[/] " + " | ".join(errs))
        raise typer.Exit(code=1)
    console.print("[green]OK[/] configuration is valid")


@issuer_app.command("init", help="Generate a self-signed P-256 test issuer")
def issuer_init(
    out_dir: Path = typer.Option(Path("."), "--out-dir", help="Directory to write issuer.key/issuer.pem"),
    common_name: str = typer.Option(DEFAULT_ISSUER_COMMON_NAME, "--common-name", help="Issuer subject CN"),
    force: bool = typer.Option(False, "--force", help="Overwrite existing files"),
) -> None:
    key_path = out_dir / "issuer.key"
    cert_path = out_dir / "issuer.pem"
    if not force and (key_path.exists() or cert_path.exists()):
        _fail(f"issuer files already exist in {out_dir} (use --force to overwrite)")

    material = create_test_issuer(common_name=common_name)
    private_pem, cert_pem = export_issuer_pem(material)

    out_dir.mkdir(parents=True, exist_ok=True)
    key_path.write_text(private_pem)
    key_path.chmod(0o600)
    cert_path.write_text(cert_pem)
    console.print(f"[green]OK[/] wrote {key_path} and {cert_path}")


@app.command("issue", help="Issue a precertificate and matching certificate")
def issue(
    base_domain: Optional[str] = typer.Option(None, "--base-domain", help="Subject domain suffix, must start with '.'"),
    issuer_key: Optional[Path] = typer.Option(None, "--issuer-key", help="Issuer private key (PEM/DER)"),
    issuer_cert: Optional[Path] = typer.Option(None, "--issuer-cert", help="Issuer certificate (PEM/DER)"),
    window_start: Optional[str] = typer.Option(None, "--window-start", help="Shard window start (ISO 8601)"),
    window_end: Optional[str] = typer.Option(None, "--window-end", help="Shard window end (ISO 8601)"),
    out_dir: Optional[Path] = typer.Option(None, "--out-dir", help="Directory to write precert.pem/cert.pem"),
    as_json: bool = typer.Option(False, "--json", help="Print the pair as JSON instead of writing files"),
) -> None:
    cfg = CTCertConfig.from_env()

    key_path = issuer_key or (Path(cfg.issuer_key_path) if cfg.issuer_key_path else None)
    cert_path = issuer_cert or (Path(cfg.issuer_cert_path) if cfg.issuer_cert_path else None)
    if key_path is None or cert_path is None:
        _fail("issuer key and certificate are required (--issuer-key/--issuer-cert or CTCERT_ISSUER_*_PATH)")

    try:
        start = parse_isoformat(window_start) if window_start else None
        end = parse_isoformat(window_end) if window_end else None
        if window_start is None and window_end is None:
            start, end = cfg.window()
    except ValueError as exc:
        _fail(f"invalid window timestamp: {exc}")

    try:
        material = load_issuer_material(key_path, cert_path, password=cfg.password_bytes())
        pair = issue_test_certificate(
            base_domain if base_domain is not None else cfg.base_domain,
            material.private_key,
            material.certificate,
            SystemClock(),
            window_start=start,
            window_end=end,
        )
    except CTCertificateError as exc:
        _fail(str(exc))

    if as_json:
        typer.echo(json.dumps(pair_to_dict(pair), indent=2))
        return

    target = out_dir or Path(cfg.output_dir)
    target.mkdir(parents=True, exist_ok=True)
    (target / "precert.pem").write_text(certificate_to_pem(pair.precert))
    (target / "cert.pem").write_text(certificate_to_pem(pair.cert))

    summary = pair_to_dict(pair)
    table = Table(title="Issued test certificate pair")
    table.add_column("Field", style="bold")
    table.add_column("Value")
    for field in ("serial", "commonName", "notBefore", "notAfter"):
        table.add_row(field, summary[field])
    console.print(table)
    console.print(f"[green]OK[/] wrote {target / 'precert.pem'} and {target / 'cert.pem'}")
