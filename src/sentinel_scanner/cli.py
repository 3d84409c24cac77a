"""Command line interface for the Sentinel scanner."""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Callable, Optional, Sequence

from .core.artifacts import CrawlResult, Finding, save_findings
from .core.config import (
    DEFAULT_MAX_RETRIES,
    DEFAULT_PROBE_CONCURRENCY,
    DEFAULT_TIMEOUT_MS,
    MAX_CRAWL_CONCURRENCY,
    MAX_CRAWL_DEPTH,
    MAX_PROBE_CONCURRENCY,
    load_crawl_configuration,
    validate_seed,
)
from .core.errors import FatalIOError, ScannerError
from .core.log import configure_logging
from .recon.crawler import Spider
from .scanners.headers import run_header_scanner
from .scanners.ports import run_port_scanner

DEFAULT_OUTPUT_DIR = "sentinel_output"

logger = logging.getLogger(__name__)


def bounded_int(minimum: int, maximum: int, label: str) -> Callable[[str], int]:
    def parse(raw: str) -> int:
        try:
            value = int(raw)
        except ValueError as exc:
            raise argparse.ArgumentTypeError(f"{label} must be an integer") from exc
        if not minimum <= value <= maximum:
            raise argparse.ArgumentTypeError(f"{label} must be between {minimum} and {maximum}")
        return value

    return parse


def url_argument(raw: str) -> str:
    if validate_seed(raw):
        raise argparse.ArgumentTypeError(f"Invalid URL: {raw}")
    return raw.strip()


def output_argument(raw: str) -> Path:
    path = Path(raw).expanduser().resolve()
    if path.suffix != ".json":
        raise argparse.ArgumentTypeError("Output file must be a JSON file")
    if path.exists():
        raise argparse.ArgumentTypeError(f"Output file already exists: {path}")
    return path


def existing_file_argument(raw: str) -> Path:
    path = Path(raw).expanduser().resolve()
    if not path.is_file():
        raise argparse.ArgumentTypeError(f"Spider results file not found at {path}")
    return path


def default_output_path(command: str) -> Path:
    directory = Path(DEFAULT_OUTPUT_DIR).resolve()
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise FatalIOError(f"Failed to create directory {directory}: {exc}") from exc
    return directory / f"{command}_{int(time.time() * 1000)}.json"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sentinel-scanner",
        description="Web reconnaissance and vulnerability scanner",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subcommands = parser.add_subparsers(dest="command", required=True)

    spider = subcommands.add_parser(
        "spider",
        help="Crawl a website and list the URLs internal to it",
    )
    spider.add_argument("-u", "--url", required=True, type=url_argument, help="Seed URL")
    spider.add_argument(
        "-d",
        "--depth",
        type=bounded_int(1, MAX_CRAWL_DEPTH, "Depth"),
        default=MAX_CRAWL_DEPTH,
        help="Maximum crawl depth (1-250)",
    )
    spider.add_argument(
        "-c",
        "--concurrency",
        type=bounded_int(1, MAX_CRAWL_CONCURRENCY, "Concurrency"),
        default=None,
        help="Concurrent requests per batch (1-30, default 30)",
    )
    spider.add_argument(
        "-r",
        "--retries",
        type=bounded_int(0, 10, "Retries"),
        default=None,
        help=f"Retries per request (0-10, default {DEFAULT_MAX_RETRIES})",
    )
    spider.add_argument(
        "-t",
        "--timeout",
        type=bounded_int(1, 60_000, "Timeout"),
        default=None,
        help=f"Per-request timeout in milliseconds (default {DEFAULT_TIMEOUT_MS})",
    )
    spider.add_argument(
        "--include-external",
        action="store_true",
        help="Follow links that leave the seed's host",
    )
    spider.add_argument("-o", "--output", type=output_argument, help="Output JSON file")
    spider.set_defaults(handler=run_spider_command)

    ports = subcommands.add_parser(
        "ports",
        help="Scan the hosts from spider results for open ports",
    )
    ports.add_argument(
        "-s", "--spider-results", required=True, type=existing_file_argument,
        help="Spider results JSON file",
    )
    ports.add_argument("--from-port", type=bounded_int(1, 65535, "Port"), default=1)
    ports.add_argument("--to-port", type=bounded_int(1, 65535, "Port"), default=65535)
    ports.add_argument(
        "--allow-list",
        type=bounded_int(1, 65535, "Port"),
        nargs="*",
        default=[22, 80, 443],
        help="Ports that are expected to be open and are skipped",
    )
    ports.add_argument(
        "-c",
        "--concurrency",
        type=bounded_int(1, MAX_PROBE_CONCURRENCY, "Concurrency"),
        default=DEFAULT_PROBE_CONCURRENCY,
    )
    ports.add_argument(
        "-t",
        "--timeout",
        type=bounded_int(1, 25_000, "Timeout"),
        default=DEFAULT_TIMEOUT_MS,
        help="Connect and banner timeout in milliseconds",
    )
    ports.add_argument("-o", "--output", type=output_argument, help="Output JSON file")
    ports.set_defaults(handler=run_ports_command)

    headers = subcommands.add_parser(
        "headers",
        help="Audit security headers of the URLs from spider results",
    )
    headers.add_argument(
        "-s", "--spider-results", required=True, type=existing_file_argument,
        help="Spider results JSON file",
    )
    headers.add_argument(
        "-c",
        "--concurrency",
        type=bounded_int(1, 20, "Concurrency"),
        default=DEFAULT_PROBE_CONCURRENCY,
    )
    headers.add_argument(
        "-r",
        "--retries",
        type=bounded_int(0, 10, "Retries"),
        default=DEFAULT_MAX_RETRIES,
    )
    headers.add_argument(
        "-t",
        "--timeout",
        type=bounded_int(1, 25_000, "Timeout"),
        default=DEFAULT_TIMEOUT_MS,
    )
    headers.add_argument("-o", "--output", type=output_argument, help="Output JSON file")
    headers.set_defaults(handler=run_headers_command)

    return parser


def run_spider_command(args: argparse.Namespace) -> None:
    config = load_crawl_configuration(
        args.url,
        max_depth=args.depth,
        concurrency=args.concurrency,
        max_retries=args.retries,
        timeout_ms=args.timeout,
        ignore_external_links=not args.include_external,
    )
    output = args.output or default_output_path("spider")

    print(f"[*] Iniciando crawler para {config.seed}")
    spider = Spider(config)
    result = spider.scan()
    result.save(output)

    print(f"[+] Resultados salvos em {output}")
    print(f"    URLs visitadas : {len(result.urls)}")
    print(f"    Profundidade   : {spider.runtime_state.depth}")


def _report_findings(findings: Sequence[Finding], output: Path) -> None:
    save_findings(findings, output)
    print(f"[+] {len(findings)} achado(s) salvos em {output}")
    for finding in findings:
        print(f" - [{finding.type} {finding.severity}] {finding.url} :: {finding.description}")


def run_ports_command(args: argparse.Namespace) -> None:
    crawl = CrawlResult.load(args.spider_results)
    output = args.output or default_output_path("ports")

    print(f"[*] Varredura de portas {args.from_port}-{args.to_port} em {crawl.seed or 'alvos'}")
    findings = run_port_scanner(
        crawl,
        from_port=args.from_port,
        to_port=args.to_port,
        allow_list=args.allow_list,
        concurrency=args.concurrency,
        timeout_ms=args.timeout,
        on_finding=lambda finding: print(f" - Porta aberta: {finding.url}"),
    )
    _report_findings(findings, output)


def run_headers_command(args: argparse.Namespace) -> None:
    crawl = CrawlResult.load(args.spider_results)
    output = args.output or default_output_path("headers")

    print(f"[*] Auditando cabeçalhos de {len(crawl.urls)} URL(s)")
    findings = run_header_scanner(
        crawl,
        concurrency=args.concurrency,
        max_retries=args.retries,
        timeout_ms=args.timeout,
    )
    _report_findings(findings, output)


def run_cli(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        args.handler(args)
    except ScannerError as exc:
        print(f"[!] {exc}", file=sys.stderr)
        print(f"[!] Falha ao executar o comando {args.command}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("[!] Execução interrompida pelo usuário", file=sys.stderr)
        return 1
    except Exception as exc:  # unrecoverable scan failure
        logger.debug("Unhandled error in %s", args.command, exc_info=True)
        print(f"[!] Erro inesperado: {exc}", file=sys.stderr)
        print(f"[!] Falha ao executar o comando {args.command}", file=sys.stderr)
        return 1
    return 0


def main() -> None:
    sys.exit(run_cli())


if __name__ == "__main__":
    main()
