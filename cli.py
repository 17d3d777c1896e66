import argparse
import logging
import os
import sys
import uuid as _uuid

import sources  # noqa: F401 ensure layout registration
from config.settings import get_settings
from errors import IngestError
from pipelines.runner import Pipeline, RunContext
from pipelines.steps.decode_rows import DecodeRows
from pipelines.steps.write_json import WriteJsonArray
from pipelines.steps.declare_collection import DeclareCollection
from pipelines.steps.import_batches import ImportBatches
from services.dead_letter import DeadLetterWriter
from services.index_client import IndexClient
from services.json_stream import open_sink
from services.reporting import print_progress, print_summary
from sources.readers import open_source
from sources.registry import available_layouts, get_layout
from utils.logging_setup import init_logging


def _close(stream) -> None:
    if stream not in (sys.stdin, sys.stdout, sys.stderr):
        stream.close()


def _decode_step(args) -> DecodeRows:
    return DecodeRows(
        get_layout(args.shape),
        reader=args.reader,
        delimiter=args.delimiter,
        header=args.layout == "header",
    )


def cmd_convert(args):
    src = open_source(args.source)
    try:
        dst = open_sink(args.destination)
        try:
            ctx = RunContext(source=src)
            pipeline = Pipeline([
                _decode_step(args),
                WriteJsonArray(dst),
            ])
            ctx = pipeline.run(ctx)
        finally:
            _close(dst)
    finally:
        _close(src)
    logging.info(
        f"Converted {ctx.meta.get('records_written', 0)} records, dropped {ctx.meta.get('rows_dropped', 0)} rows",
        extra={"step": "convert", "status": "done"},
    )
    return 0


def cmd_import(args):
    settings = get_settings()
    layout = get_layout(args.shape)
    collection = args.collection or settings.collection_for(args.shape)
    client = IndexClient.from_settings(settings, url=args.url, key=args.key, max_retries=args.retries)
    dead_letter = DeadLetterWriter(args.dead_letter)

    src = open_source(args.source)
    try:
        ctx = RunContext(source=src)
        # Header is checked before the collection is declared; no record is read until then
        pipeline = Pipeline([
            _decode_step(args),
            DeclareCollection(client, layout.collection_schema(collection)),
            ImportBatches(client, collection, batch_size=args.batch, dead_letter=dead_letter, on_progress=print_progress),
        ])
        ctx = pipeline.run(ctx)
    finally:
        _close(src)

    report = ctx.meta["report"]
    print_summary(report, args.dead_letter)
    return 1 if report.partial else 0


def _add_input_args(p, settings) -> None:
    p.add_argument("--source", "-s", default=None, help="Input file (default: stdin)")
    p.add_argument("--shape", choices=sorted(available_layouts()), default="tax", help="Record shape (default: tax)")
    p.add_argument(
        "--layout",
        choices=["positional", "header"],
        default="positional",
        help="Locate columns by fixed position or by the header row (default: positional)",
    )
    p.add_argument("--reader", choices=["lines", "csv"], default="lines", help="Literal line split or quote-aware CSV (default: lines)")
    p.add_argument("--delimiter", default=settings.field_delimiter, help="Field delimiter (default from settings)")


def _positive_int(value: str) -> int:
    n = int(value)
    if n < 1:
        raise argparse.ArgumentTypeError("must be at least 1")
    return n


def build_parser(settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Corporate tax record ingestion")
    parser.add_argument(
        "--log-level", "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=settings.log_level.upper(),
        help="Set logging level (default: from settings)",
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_conv = sub.add_parser("convert", help="Convert the input to a JSON array")
    _add_input_args(p_conv, settings)
    p_conv.add_argument("--destination", "-d", default=None, help="Output file (default: stdout)")
    p_conv.set_defaults(func=cmd_convert)

    p_imp = sub.add_parser("import", help="Declare the collection and upsert records in batches")
    _add_input_args(p_imp, settings)
    p_imp.add_argument("--url", "-u", default=settings.index_url, help="Index base URL (default: INDEX_URL)")
    p_imp.add_argument("--key", "-k", default=settings.index_api_key, help="Index API key (default: INDEX_API_KEY)")
    p_imp.add_argument("--batch", "-b", type=_positive_int, default=settings.batch_size, help="Records per import request (default: 200)")
    p_imp.add_argument("--collection", default=None, help="Collection name (default depends on --shape)")
    p_imp.add_argument("--retries", type=int, default=settings.max_retries, help="Retries per request on transient errors")
    p_imp.add_argument("--dead-letter", default=settings.dead_letter_path, help="NDJSON file for documents that failed to import")
    p_imp.set_defaults(func=cmd_import)
    return parser


def main():
    settings = get_settings()
    parser = build_parser(settings)
    args = parser.parse_args()
    if args.cmd == "import" and not (args.url and args.key):
        parser.error("--url and --key are required for import (or set INDEX_URL and INDEX_API_KEY)")

    init_logging(args.log_level)
    if not os.getenv("RUN_ID"):
        os.environ["RUN_ID"] = _uuid.uuid4().hex

    try:
        code = args.func(args)
    except IngestError as e:
        logging.error(f"Aborting: {e.message}", extra={"status": "fatal", "error": e.kind})
        sys.exit(e.exit_code)
    except KeyboardInterrupt:
        logging.info("Process interrupted by user")
        sys.exit(130)
    if code:
        sys.exit(code)


if __name__ == "__main__":
    main()
