"""CLI to generate a cache control manifest from a build output directory."""
import argparse
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table
from tqdm import tqdm

from swmanifest.errors import ConfigurationError, HashRetrievalError
from swmanifest.tools.filesystem import LocalFilesystem
from swmanifest.tools.generator import Generator
from swmanifest.tools.manifest_io import load_config, save_manifest


console = Console()


def _env_int(name: str):
    value = os.getenv(name)
    return int(value) if value else None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate a cache control manifest (ngsw.json) from a build directory"
    )
    parser.add_argument(
        "dist_dir",
        type=Path,
        help="Build output directory to scan"
    )
    parser.add_argument(
        "config",
        type=Path,
        help="Path to the cache configuration JSON (ngsw-config.json)"
    )
    parser.add_argument(
        "--base-href",
        type=str,
        default=os.getenv("SWMANIFEST_BASE_HREF", "/"),
        help="Base path the application is served from (default: $SWMANIFEST_BASE_HREF or /)"
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Where to write the manifest (default: <dist_dir>/ngsw.json)"
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=_env_int("SWMANIFEST_HASH_WORKERS"),
        help="Threads used for hashing (default: $SWMANIFEST_HASH_WORKERS or executor default)"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging (per-group matching details)"
    )
    return parser


def _configure_logging(args: argparse.Namespace) -> None:
    if args.debug:
        log_level = logging.DEBUG
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    elif args.verbose:
        log_level = logging.INFO
        log_format = "%(asctime)s - %(levelname)s - %(message)s"
    else:
        log_level = logging.WARNING
        log_format = "%(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )


def main(argv=None):
    load_dotenv()
    args = build_parser().parse_args(argv)
    _configure_logging(args)
    logger = logging.getLogger(__name__)

    if not args.dist_dir.is_dir():
        console.print(f"[red]Error: build directory not found at {args.dist_dir}[/red]")
        sys.exit(1)

    output_path = args.output or args.dist_dir / "ngsw.json"
    logger.info(f"Build dir: {args.dist_dir}, config: {args.config}, base href: {args.base_href}")

    fs = LocalFilesystem(args.dist_dir)
    pbar = tqdm(desc="Hashing files", unit="file", disable=not sys.stderr.isatty())

    def progress_callback(file: str) -> None:
        pbar.set_postfix_str(file[-40:])
        pbar.update(1)

    try:
        config = load_config(args.config)
        generator = Generator(
            fs,
            args.base_href,
            max_workers=args.workers,
            progress_callback=progress_callback,
        )
        manifest = generator.process(config)
    except ConfigurationError as e:
        pbar.close()
        console.print(f"[red]Configuration error: {e}[/red]")
        sys.exit(1)
    except HashRetrievalError as e:
        pbar.close()
        console.print(f"[red]Hashing failed: {e}[/red]")
        sys.exit(1)
    pbar.close()

    save_manifest(manifest, output_path)

    table = Table(title="Manifest Summary")
    table.add_column("Asset group", style="cyan")
    table.add_column("Install", style="green")
    table.add_column("Update", style="green")
    table.add_column("Files", style="magenta", justify="right")
    for group in manifest.asset_groups:
        table.add_row(group.name, group.install_mode, group.update_mode, str(len(group.urls)))
    console.print(table)

    console.print(f"Data groups:      {len(manifest.data_groups)}")
    console.print(f"Hashed files:     {len(manifest.hash_table)}")
    console.print(f"Navigation rules: {len(manifest.navigation_urls)}")
    console.print(f"\n✓ [green]Manifest written to[/green] {output_path}")


if __name__ == "__main__":
    main()
