"""Helper script to execute the spider in isolation.

Crawls a single URL and prints a per-layer summary without writing any
output file. Useful for quick smoke tests or for debugging scope rules.
"""

from __future__ import annotations

import argparse
from pathlib import Path
import sys

# Guarantee imports resolve to the local source tree when running from a checkout.
PROJECT_ROOT = Path(__file__).resolve().parent.parent
SRC_PATH = PROJECT_ROOT / "src"
if SRC_PATH.exists():
    src_str = str(SRC_PATH)
    if src_str not in sys.path:
        sys.path.insert(0, src_str)

from sentinel_scanner.core.config import load_crawl_configuration
from sentinel_scanner.core.errors import ScannerError
from sentinel_scanner.core.log import configure_logging
from sentinel_scanner.recon.crawler import Spider
from sentinel_scanner.recon.state import CrawlState


def parse_arguments() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Executa somente o crawler (Spider) em uma URL alvo"
    )
    parser.add_argument(
        "url",
        help="URL base do alvo. Utilize apenas ambientes sob sua autorização",
    )
    parser.add_argument("--depth", type=int, default=2, help="Profundidade máxima (padrão: 2)")
    parser.add_argument("--concurrency", type=int, default=None)
    parser.add_argument("--timeout", type=int, default=None, help="Timeout por requisição (ms)")
    parser.add_argument(
        "--include-external",
        action="store_true",
        help="Segue links para outros hosts",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args()


def print_layer(depth: int, state: CrawlState) -> None:
    print(f"    camada {depth}: {len(state.visited)} visitadas, {len(state.frontier)} na fronteira")


def main() -> None:
    args = parse_arguments()
    configure_logging(args.verbose)

    try:
        config = load_crawl_configuration(
            args.url,
            max_depth=args.depth,
            concurrency=args.concurrency,
            timeout_ms=args.timeout,
            ignore_external_links=not args.include_external,
        )
    except ScannerError as exc:
        print(f"[!] {exc}")
        sys.exit(1)

    spider = Spider(config, on_layer_complete=print_layer)

    print(f"[*] Iniciando crawler para {config.seed}")
    try:
        result = spider.scan()
    except KeyboardInterrupt:
        print("[!] Execução interrompida pelo usuário")
        return

    print(f"[+] {len(result.urls)} URL(s) visitadas")
    for url in sorted(result.urls):
        print(f"    {url}")


if __name__ == "__main__":
    main()
