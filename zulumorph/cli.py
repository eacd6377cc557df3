"""
Command-Line Interface for zulumorph.

- Analysing Zulu text and single words
- Extracting and analysing files, with optional export
- Running the HTTP API
"""
import argparse
import json
import logging
import mimetypes
import sys
from pathlib import Path

from tqdm import tqdm

from . import __version__
from .config import ServiceConfig
from .errors import ZulumorphError
from .logging_config import setup_logging


def cmd_analyze(args):
    """Analyse Zulu text into <LINE n> tagged output."""
    from .parser import analyze_lines
    from .formatter import format_text, format_word

    if args.text:
        text = args.text
    elif args.file:
        with open(args.file, 'r', encoding='utf-8') as f:
            text = f.read()
    else:
        text = sys.stdin.read()

    lines = analyze_lines(text, workers=args.workers)
    if args.format == 'json':
        payload = [
            {
                "line": line.line_number,
                "words": [[m.to_dict() for m in word] for word in line.words],
                "formatted": [format_word(word) for word in line.words],
            }
            for line in lines
        ]
        print(json.dumps(payload, indent=2, ensure_ascii=False))
    else:
        print(format_text(lines))


def cmd_word(args):
    """Analyse a single word."""
    from .parser import analyze_word
    from .formatter import format_word

    morphemes = analyze_word(args.word)
    if args.format == 'json':
        print(json.dumps([m.to_dict() for m in morphemes], indent=2, ensure_ascii=False))
    else:
        print(format_word(morphemes))


def cmd_files(args):
    """Extract text from files, analyse it, and print or export the records."""
    from .batch import AnalysisService, UploadedFile
    from .export import export_results

    service = AnalysisService(ServiceConfig(workers=args.workers))

    records = []
    for path in tqdm(args.files, desc="Analyzing files", unit=" files", disable=args.quiet):
        path = Path(path)
        try:
            upload = UploadedFile(filename=path.name, data=path.read_bytes(),
                                  mimetype=mimetypes.guess_type(path.name)[0] or "application/octet-stream")
        except OSError as e:
            records.append({"filename": path.name, "status": "failed", "error": str(e)})
            continue
        records.append(service.process_file(upload))

    failed = [r for r in records if r["status"] == "failed"]

    if args.export:
        document = export_results(records, args.export)
        if args.output:
            Path(args.output).write_text(document.content, encoding='utf-8')
            print(f"✓ Wrote {len(records)} records to {args.output}")
        else:
            print(document.content)
    else:
        for record in records:
            print(f"=== {record['filename']} [{record['status']}] ===")
            if record['status'] == 'completed':
                print(record['morphological_analysis'])
            else:
                print(f"ERROR: {record['error']}", file=sys.stderr)
            print()

    if failed:
        sys.exit(1)


def cmd_serve(args):
    """Run the HTTP API."""
    from .server import main as serve

    config = ServiceConfig.from_env()
    if args.host:
        config.host = args.host
    if args.port:
        config.port = args.port
    if args.debug:
        config.debug = True
    if args.log_file:
        config.log_file = args.log_file
    serve(config)


def cmd_info(args):
    """Display rule table information."""
    from .rules import KNOWN_VERB_ROOTS, default_rule_tables

    print("=== zulumorph System Information ===\n")
    print(f"Python: {sys.version.split()[0]}")
    print(f"zulumorph: {__version__}")

    print("\nRule tables (declaration order is precedence):")
    for name, count in default_rule_tables().summary().items():
        print(f"  {name}: {count}")
    print(f"  known verb roots: {len(KNOWN_VERB_ROOTS)}")


def build_parser():
    parser = argparse.ArgumentParser(
        prog='zulumorph',
        description='zulumorph: rule-based morphological tagging of Zulu text',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Analyse text
  zulumorph analyze "Umuntu uhamba."
  zulumorph analyze --file input.txt --format json

  # Analyse one word
  zulumorph word umuntu

  # Extract and analyse documents, export as CSV
  zulumorph files report.pdf notes.docx --export csv -o results.csv

  # Run the HTTP API
  zulumorph serve --port 3000

  # System info
  zulumorph info
        """
    )
    parser.add_argument('--debug', action='store_true', help='Log every segmentation rule applied')
    parser.add_argument('--log-file', default=None, help='Also write logs to this file')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # --- analyze command ---
    parser_analyze = subparsers.add_parser('analyze', help='Analyse Zulu text')
    parser_analyze.add_argument('text', nargs='?', help='Text to analyse (default: stdin)')
    parser_analyze.add_argument('-f', '--file', help='Read input from file')
    parser_analyze.add_argument('--format', choices=['text', 'json'], default='text',
                                help='Output format (default: text)')
    parser_analyze.add_argument('--workers', type=int, default=1,
                                help='Analyse lines on N threads (default: 1)')
    parser_analyze.set_defaults(func=cmd_analyze)

    # --- word command ---
    parser_word = subparsers.add_parser('word', help='Analyse a single word')
    parser_word.add_argument('word', help='Word to analyse')
    parser_word.add_argument('--format', choices=['text', 'json'], default='text',
                             help='Output format (default: text)')
    parser_word.set_defaults(func=cmd_word)

    # --- files command ---
    parser_files = subparsers.add_parser('files', help='Extract and analyse documents')
    parser_files.add_argument('files', nargs='+', help='TXT, PDF, DOC/DOCX, JSON or CSV files')
    parser_files.add_argument('--export', choices=['csv', 'json', 'txt'],
                              help='Render the result records in this format')
    parser_files.add_argument('-o', '--output', help='Write the export to this file')
    parser_files.add_argument('--workers', type=int, default=1,
                              help='Analyse lines on N threads (default: 1)')
    parser_files.add_argument('-q', '--quiet', action='store_true', help='Hide the progress bar')
    parser_files.set_defaults(func=cmd_files)

    # --- serve command ---
    parser_serve = subparsers.add_parser('serve', help='Run the HTTP API')
    parser_serve.add_argument('--host', help='Bind address (default: 0.0.0.0 or ZULUMORPH_HOST)')
    parser_serve.add_argument('--port', type=int, help='Port (default: 3000 or PORT)')
    parser_serve.set_defaults(func=cmd_serve)

    # --- info command ---
    parser_info = subparsers.add_parser('info', help='Display system information')
    parser_info.set_defaults(func=cmd_info)

    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    if args.command != 'serve':
        # Keep stdout clean for the analysis output
        logging.basicConfig(level=logging.DEBUG if args.debug else logging.WARNING, stream=sys.stderr)
        if args.log_file:
            setup_logging(log_file=args.log_file, debug=args.debug, stream=sys.stderr)

    try:
        args.func(args)
    except ZulumorphError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
