"""
Plainverse - Main execution script
Command line entry point for transforming, merging and inspecting a checkpoint
"""
import sys
import argparse
import logging
from typing import List, Optional, Tuple

from dotenv import load_dotenv

from plainverse import settings
from plainverse.core.corpus_loader import load_corpus
from plainverse.core.exceptions import CorpusStructureError, ScopeNotFoundError
from plainverse.core.progress import ProgressTracker
from plainverse.core.rules import apply_rules
from plainverse.core.scope import RegenerationScope
from plainverse.core.transformer import TransformMode, create_transform_strategy
from plainverse.services.checkpoint_service import CheckpointService
from plainverse.services.merge_service import MergeService
from plainverse.services.transform_service import TransformService
from plainverse.storage import StorageError, create_checkpoint_store

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

MODE_CHOICES = [mode.value for mode in TransformMode] + ["combined"]


def setup_logging(verbose: bool = False, log_file: Optional[str] = None):
    """Setup structured logging configuration"""
    log_level = logging.DEBUG if verbose else logging.INFO

    detailed_formatter = logging.Formatter(
        '%(asctime)s | %(levelname)-8s | %(name)-20s | %(funcName)-15s:%(lineno)-4d | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    simple_formatter = logging.Formatter(
        '%(asctime)s | %(levelname)-8s | %(message)s',
        datefmt='%H:%M:%S'
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(simple_formatter)

    file_handler = logging.FileHandler(log_file or settings.get_log_file(), encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(detailed_formatter)

    logging.basicConfig(
        level=logging.DEBUG,
        handlers=[console_handler, file_handler],
        force=True
    )
    for noisy in ('google', 'urllib3', 'grpc'):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def split_transform_targets(targets: List[str]) -> Tuple[Optional[str], Optional[str]]:
    """
    Interpret the optional positional arguments of ``transform``.

    ``transform [MODE] [BOOK]``: the first value is a mode when it names one,
    otherwise it is the book filter.
    """
    if len(targets) > 2:
        raise ValueError(f"Expected at most MODE and BOOK, got: {' '.join(targets)}")
    mode = None
    book = None
    remaining = list(targets)
    if remaining and remaining[0].lower() in MODE_CHOICES:
        mode = remaining.pop(0)
    if remaining:
        book = remaining.pop(0)
    if remaining:
        raise ValueError(f"Unexpected argument: {remaining[0]}")
    return mode, book


def build_scope(args) -> Tuple[RegenerationScope, Optional[str], Optional[int]]:
    """Translate regeneration flags to a scope plus book and chapter filters"""
    if args.regenerate_chapter:
        book, chapter = args.regenerate_chapter
        try:
            chapter_number = int(chapter)
        except ValueError:
            raise ValueError(f"Chapter must be a number, got: {chapter}")
        return RegenerationScope.for_chapter(book, chapter_number), book, chapter_number
    if args.regenerate_book:
        return RegenerationScope(book=args.regenerate_book), args.regenerate_book, None
    return RegenerationScope(regenerate_all=args.regenerate), None, None


def cmd_transform(args) -> int:
    mode_arg, book_filter = split_transform_targets(args.targets)
    mode = TransformMode.parse(mode_arg or settings.get_transform_mode())
    scope, scope_book, scope_chapter = build_scope(args)
    if scope_book is not None:
        if book_filter is not None and book_filter != scope_book:
            raise ValueError(
                f"Book filter {book_filter} conflicts with regeneration target {scope_book}"
            )
        book_filter = scope_book

    source = load_corpus(args.source or settings.get_source_path())
    store = create_checkpoint_store(args.output)
    strategy = create_transform_strategy(mode)

    service = TransformService(strategy, store, progress=ProgressTracker())
    result = service.run(source, scope=scope, book_filter=book_filter, chapter_filter=scope_chapter)

    logger.info(
        f"Transformed {result.transformed_verses}/{result.total_verses} verses "
        f"({result.succeeded} succeeded, {result.failed} failed this run). Output: {result.output_location}"
    )
    return 0


def cmd_merge(args) -> int:
    source = load_corpus(args.source or settings.get_source_path())
    store = create_checkpoint_store(args.output)
    result = MergeService(store).merge_from(source)

    print(f"Kept: {result.kept}")
    print(f"New: {len(result.new)}")
    print(f"Changed: {len(result.changed)}")
    print(f"Removed: {len(result.removed)}")
    print(f"Output: {store.location}")
    return 0


def cmd_normalize(args) -> int:
    store = create_checkpoint_store(args.output)
    changed = CheckpointService(store).renormalize()
    print(f"Normalized {changed} verses in {store.location}")
    return 0


def cmd_status(args) -> int:
    store = create_checkpoint_store(args.output)
    status = CheckpointService(store).status()

    print(f"Checkpoint: {store.location}")
    print(f"Total verses: {status.total}")
    print(f"Transformed: {status.transformed} ({status.percent_complete:.1f}%)")
    print(f"Failed: {status.failed}")
    print(f"Untransformed: {status.untransformed}")
    if args.show_failures:
        for (book, chapter, verse), message in status.failures:
            print(f"  {book} {chapter}:{verse} - {message}")
    return 0


def cmd_rules(args) -> int:
    text = " ".join(args.text)
    print(f"Original:    {text}")
    print(f"Transformed: {apply_rules(text)}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="plainverse",
        description="Modernize archaic scripture text into plain English"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-file", default=None, help="Log file path (default: from config)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    transform = subparsers.add_parser("transform", help="Transform untransformed or failed verses")
    transform.add_argument(
        "targets", nargs="*", metavar="[MODE] [BOOK]",
        help=f"Optional mode ({', '.join(MODE_CHOICES)}) and book short name"
    )
    transform.add_argument("--regenerate", action="store_true", help="Regenerate every verse")
    transform.add_argument("--regenerate-book", metavar="BOOK", help="Regenerate every verse of one book")
    transform.add_argument(
        "--regenerate-chapter", nargs=2, metavar=("BOOK", "CHAPTER"),
        help="Regenerate one chapter and process nothing else"
    )
    transform.add_argument("--source", help="Source corpus (default: from config)")
    transform.add_argument("--output", help="Checkpoint file (default: from config)")
    transform.set_defaults(func=cmd_transform)

    merge = subparsers.add_parser("merge", help="Merge a re-parsed source into the checkpoint")
    merge.add_argument("--source", help="Source corpus (default: from config)")
    merge.add_argument("--output", help="Checkpoint file (default: from config)")
    merge.set_defaults(func=cmd_merge)

    normalize = subparsers.add_parser("normalize", help="Re-run quote and punctuation repair on the checkpoint")
    normalize.add_argument("--output", help="Checkpoint file (default: from config)")
    normalize.set_defaults(func=cmd_normalize)

    status = subparsers.add_parser("status", help="Show checkpoint progress")
    status.add_argument("--output", help="Checkpoint file (default: from config)")
    status.add_argument("--show-failures", action="store_true", help="List failed verses")
    status.set_defaults(func=cmd_status)

    rules = subparsers.add_parser("rules", help="Show rule engine output for sample text")
    rules.add_argument("text", nargs="+", help="Text to transform")
    rules.set_defaults(func=cmd_rules)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose, args.log_file)

    try:
        return args.func(args)
    except (CorpusStructureError, ScopeNotFoundError, StorageError, ValueError) as e:
        logger.error(f"Execution failed: {e}")
        return 1
    except KeyboardInterrupt:
        logger.warning("Interrupted; progress up to the last completed chapter is saved")
        return 130


if __name__ == "__main__":
    sys.exit(main())
