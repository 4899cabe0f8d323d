from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

from .builder import build_site
from .config import BuildOptions, load_config, load_env_file, lookup
from .errors import BuildError
from .models import SiteConfig
from .utils import DATE_PRESETS, DEFAULT_DATE_FORMAT, parse_bool, parse_int
from .watch import watch


def options_from_args(args: argparse.Namespace) -> BuildOptions:
    return BuildOptions(
        content_dir=Path(args.input),
        output_dir=Path(args.output),
        cache_dir=Path(args.cache),
        per_page=max(1, args.per_page),
        suffix=args.suffix,
        force=args.force,
        auto_date=args.auto_date,
        date_format=args.date_format,
        quiet=args.quiet,
        site=SiteConfig(
            base_url=(args.base_url or "").strip(),
            title=args.site_title,
            description=args.site_description,
        ),
    )


def run_build(options: BuildOptions) -> None:
    start = time.perf_counter()
    report = build_site(options)
    elapsed = time.perf_counter() - start
    print(report.summary())
    print(f"Build completed in {elapsed:.2f}s.")


def main(argv: list[str] | None = None) -> None:
    pre_parser = argparse.ArgumentParser(add_help=False)
    pre_parser.add_argument(
        "--config",
        default="site.toml",
        help="Path to site config file (TOML/YAML/JSON).",
    )
    pre_parser.add_argument("-e", "--env", default=".env", help="Path to .env file.")
    pre_args, _ = pre_parser.parse_known_args(argv)
    load_env_file(Path(pre_args.env))
    config = load_config(Path(pre_args.config))

    def cfg_value(key: str, default: object) -> object:
        value = lookup(config, key)
        return default if value is None else value

    def cfg_str(key: str, default: str) -> str:
        value = cfg_value(key, default)
        return default if value is None else str(value)

    def cfg_bool(key: str, default: bool) -> bool:
        value = cfg_value(key, default)
        return parse_bool(value) if value is not None else default

    def cfg_int(key: str, default: int) -> int:
        value = cfg_value(key, default)
        return parse_int(value, default)

    parser = argparse.ArgumentParser(
        description="Incremental static site generator for a folder of Markdown files.",
        epilog="Environment variables: MDSITE_<KEY> for every config key. "
        "Precedence: option > env var > .env file > config file > default.",
    )
    parser.add_argument("--config", default=pre_args.config, help="Path to site config file (TOML/YAML/JSON).")
    parser.add_argument("-e", "--env", default=pre_args.env, help="Path to .env file.")
    parser.add_argument("-i", "--input", default=cfg_str("input", "pages"), help="Directory containing Markdown sources.")
    parser.add_argument("-o", "--output", default=cfg_str("output", "public"), help="Output directory for the site.")
    parser.add_argument("--cache", default=cfg_str("cache", "html"), help="Directory for rendered HTML fragments.")
    parser.add_argument(
        "--per-page",
        default=cfg_int("per_page", 20),
        type=int,
        help="Number of posts per listing page.",
    )
    parser.add_argument(
        "--suffix",
        default=cfg_str("suffix", ".html"),
        help="Suffix for generated files and links (empty for extensionless URLs).",
    )
    parser.add_argument(
        "--force",
        action=argparse.BooleanOptionalAction,
        default=cfg_bool("force", False),
        help="Re-render every source and rewrite every output.",
    )
    parser.add_argument(
        "--auto-date",
        action=argparse.BooleanOptionalAction,
        default=cfg_bool("auto_date", False),
        help="Prepend the file date to sources that do not start with one.",
    )
    parser.add_argument("--base-url", default=cfg_str("base_url", ""), help="Public site URL used to absolutize links.")
    parser.add_argument("--site-title", default=cfg_str("site_title", "My Site"), help="Site title.")
    parser.add_argument("--site-description", default=cfg_str("site_description", ""), help="Site description.")
    parser.add_argument(
        "--date-format",
        default=cfg_str("date_format", DEFAULT_DATE_FORMAT),
        help=f"Date display format: one of {', '.join(DATE_PRESETS)} or a strftime pattern.",
    )
    parser.add_argument(
        "-w",
        "--watch",
        action=argparse.BooleanOptionalAction,
        default=cfg_bool("watch", False),
        help="Watch the input directory and rebuild after changes settle.",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action=argparse.BooleanOptionalAction,
        default=cfg_bool("quiet", False),
        help="Only print the build summary.",
    )
    args = parser.parse_args(argv)
    options = options_from_args(args)

    try:
        run_build(options)
    except BuildError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    if args.watch:
        try:
            watch(options.content_dir, lambda: run_build(options))
        except KeyboardInterrupt:
            print("Stopped watching.")
