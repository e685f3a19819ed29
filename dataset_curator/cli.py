from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from dataset_curator.analytics import analyze_dataset
from dataset_curator.core import (
    CuratorSettings,
    FormatLabel,
    Pair,
    dump_settings,
    ensure_directory,
    iter_source_files,
    load_settings,
)
from dataset_curator.parsers import extract, read_document
from dataset_curator.parsers.documents import SUPPORTED_EXTENSIONS
from dataset_curator.parsers.router import AUTO_FORMAT
from dataset_curator.processing import (
    EXPORT_FORMATS,
    IMPORT_FORMATS,
    export_pairs,
    find_cleaning_issues,
    import_pairs,
)
from dataset_curator.storage import DatasetStore

logger = logging.getLogger("dataset_curator")

DEFAULT_STORE = "dataset.json"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Extract, clean and analyze prompt/completion datasets.")
    parser.add_argument("--config", default=None, help="YAML file with extraction/analytics settings.")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    extract_parser = subparsers.add_parser("extract", help="Extract pairs from documents.")
    extract_parser.add_argument("inputs", nargs="+", help="Files or directories with raw documents.")
    extract_parser.add_argument(
        "--format",
        default=AUTO_FORMAT,
        choices=[AUTO_FORMAT] + [label.value for label in FormatLabel],
        help="Force a document format instead of detecting it.",
    )
    extract_parser.add_argument("--output", help="Write extracted pairs to this file.")
    extract_parser.add_argument(
        "--output-format",
        default="json",
        choices=EXPORT_FORMATS,
        help="Serialization used with --output or stdout.",
    )
    extract_parser.add_argument("--store", help="Append extracted pairs to a dataset store.")

    analyze_parser = subparsers.add_parser("analyze", help="Print an analysis report.")
    _add_source_arguments(analyze_parser)
    analyze_parser.add_argument("--output", help="Write the JSON report to this file.")

    clean_parser = subparsers.add_parser("clean", help="Scan a dataset store for problems.")
    clean_parser.add_argument("--store", default=DEFAULT_STORE, help="Dataset store path.")
    clean_parser.add_argument("--min-length", type=int, default=20, help="Short-text threshold (chars).")
    clean_parser.add_argument(
        "--fix",
        action="store_true",
        help="Remove exact duplicates and incomplete pairs from the store.",
    )

    export_parser = subparsers.add_parser("export", help="Export a dataset store.")
    export_parser.add_argument("--store", default=DEFAULT_STORE, help="Dataset store path.")
    export_parser.add_argument("--format", default="json", choices=EXPORT_FORMATS, help="Export format.")
    export_parser.add_argument("--output", help="Target file (stdout when omitted).")
    export_parser.add_argument("--remove-duplicates", action="store_true", help="Drop exact duplicates.")
    export_parser.add_argument(
        "--keep-incomplete",
        dest="validate",
        action="store_false",
        help="Keep pairs with an empty prompt or completion.",
    )

    import_parser = subparsers.add_parser("import", help="Import pairs into a dataset store.")
    import_parser.add_argument("input", help="File to import.")
    import_parser.add_argument("--format", choices=IMPORT_FORMATS, help="Input format (from extension by default).")
    import_parser.add_argument("--store", default=DEFAULT_STORE, help="Dataset store path.")

    config_parser = subparsers.add_parser("config", help="Write the effective settings as YAML.")
    config_parser.add_argument("--output", required=True, help="Target YAML file.")
    return parser


def _add_source_arguments(parser: argparse.ArgumentParser) -> None:
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--store", help="Dataset store path.")
    source.add_argument("--input", help="Exported dataset file (json, jsonl, csv or text).")
    parser.add_argument("--input-format", choices=IMPORT_FORMATS, help="Format of --input.")


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def collect_files(inputs: Sequence[str]) -> List[Path]:
    files: List[Path] = []
    for root in inputs:
        root_path = Path(root).expanduser().resolve()
        if not root_path.exists():
            logger.warning("Input path does not exist: %s", root_path)
            continue
        if root_path.is_file():
            files.append(root_path)
        else:
            files.extend(path for path in iter_source_files(root_path) if path.suffix.lower() in SUPPORTED_EXTENSIONS)
    return files


def guess_format(path: Path) -> str:
    suffix = path.suffix.lower().lstrip(".")
    if suffix in IMPORT_FORMATS:
        return suffix
    return "text"


def write_output(content: str, output: Optional[str]) -> None:
    if not output:
        sys.stdout.write(content + "\n")
        return
    path = Path(output)
    ensure_directory(path.parent)
    path.write_text(content, encoding="utf-8")
    logger.info("Wrote %s", path)


def load_source_pairs(args: argparse.Namespace) -> List[Pair]:
    if args.input:
        path = Path(args.input)
        return import_pairs(path.read_text(encoding="utf-8"), args.input_format or guess_format(path))
    return list(DatasetStore(args.store or DEFAULT_STORE).get_all())


def run_extract(args: argparse.Namespace, settings: CuratorSettings) -> int:
    files = collect_files(args.inputs)
    logger.info("Discovered %d source files.", len(files))

    pairs: List[Pair] = []
    for path in files:
        text = read_document(path)
        if not text.strip():
            logger.warning("No text extracted from %s", path)
            continue
        result = extract(text, format_override=args.format, settings=settings.extraction)
        logger.info("%s: %s format, %d pairs", path.name, result.format.value, len(result.pairs))
        pairs.extend(result.pairs)

    if not pairs:
        logger.info("0 pairs extracted.")
    if args.store:
        DatasetStore(args.store).add_many(pairs)
    if args.output or not args.store:
        write_output(export_pairs(pairs, args.output_format, validate=False), args.output)
    return 0


def run_analyze(args: argparse.Namespace, settings: CuratorSettings) -> int:
    report = analyze_dataset(load_source_pairs(args), settings.analytics)
    if report is None:
        return 0
    write_output(report.model_dump_json(indent=2), args.output)
    return 0


def run_clean(args: argparse.Namespace, settings: CuratorSettings) -> int:
    store = DatasetStore(args.store)
    issues = find_cleaning_issues(store.get_all(), min_length=args.min_length)
    if not issues:
        logger.info("No issues found in %s.", store.path)
    for issue in issues:
        logger.info("%s: %s", issue.type, issue.description)
    write_output(json.dumps([issue.model_dump() for issue in issues], ensure_ascii=False, indent=2), None)

    if args.fix:
        removed = store.remove_duplicates() + store.validate()
        logger.info("Removed %d pairs; %d remain.", removed, len(store))
    return 0


def run_export(args: argparse.Namespace, settings: CuratorSettings) -> int:
    pairs = DatasetStore(args.store).get_all()
    content = export_pairs(
        pairs,
        args.format,
        remove_duplicates=args.remove_duplicates,
        validate=args.validate,
    )
    write_output(content, args.output)
    return 0


def run_import(args: argparse.Namespace, settings: CuratorSettings) -> int:
    path = Path(args.input)
    pairs = import_pairs(path.read_text(encoding="utf-8"), args.format or guess_format(path))
    DatasetStore(args.store).add_many(pairs)
    logger.info("Imported %d pairs from %s", len(pairs), path)
    return 0


def run_config(args: argparse.Namespace, settings: CuratorSettings) -> int:
    path = Path(args.output)
    ensure_directory(path.parent)
    dump_settings(settings, str(path))
    logger.info("Wrote settings to %s", path)
    return 0


COMMANDS = {
    "extract": run_extract,
    "analyze": run_analyze,
    "clean": run_clean,
    "export": run_export,
    "import": run_import,
    "config": run_config,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_level)
    settings = load_settings(args.config)
    return COMMANDS[args.command](args, settings)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
