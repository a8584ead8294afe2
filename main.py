from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path

from reportpdf.config import get_settings
from reportpdf.errors import EmissionFailure, InvalidInput, LayoutOverflow
from reportpdf.report.emitter import document_to_bytes, suggested_filename
from reportpdf.report.render import render_document, validate_report_text
from reportpdf.types import RenderSummary


logger = logging.getLogger('reportpdf')


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level or get_settings().log_level).upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )


def _print_json(payload: dict) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def _read_report(source: str) -> str:
    if source == '-':
        return sys.stdin.read()
    return Path(source).expanduser().read_text(encoding='utf-8')


def _resolve_output(output: str | None, filename: str) -> Path:
    if not output:
        return Path.cwd() / filename
    path = Path(output).expanduser()
    if path.is_dir():
        return path / filename
    return path


def cmd_render(args: argparse.Namespace) -> int:
    settings = get_settings()
    try:
        report = validate_report_text(_read_report(args.input), max_chars=settings.max_report_chars)
    except FileNotFoundError:
        _print_json({'status': 'error', 'message': f'Input not found: {args.input}'})
        return 2
    except InvalidInput as exc:
        _print_json({'status': 'error', 'message': str(exc)})
        return 2

    title = args.title
    generated_at = None
    if args.banner or settings.pdf_include_banner:
        title = title or settings.pdf_document_title
        generated_at = datetime.now().strftime('%Y-%m-%d %H:%M:%S')

    filename = suggested_filename(args.filename, prefix=settings.pdf_filename_prefix)
    output_path = _resolve_output(args.output, filename)

    try:
        document = render_document(report, settings=settings, title=title, generated_at=generated_at)
        payload = document_to_bytes(document)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(payload)
    except (LayoutOverflow, EmissionFailure) as exc:
        logger.error('Render failed: %s', exc)
        _print_json({'status': 'error', 'message': str(exc)})
        return 2

    summary = RenderSummary(
        status='ok',
        path=str(output_path),
        filename=output_path.name,
        pages=document.page_count,
        bytes=len(payload),
    )
    _print_json(summary.model_dump(mode='json'))
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    from reportpdf.server import create_app

    settings = get_settings()
    app = create_app(settings)
    host = args.host or settings.server_host
    port = args.port or settings.server_port
    logger.info('Starting %s on %s:%s', settings.app_name, host, port)
    app.run(host=host, port=port, threaded=True)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Dictated report PDF renderer')
    sub = parser.add_subparsers(dest='command', required=True)

    render = sub.add_parser('render', help='Render report text into a paginated PDF')
    render.add_argument('--input', required=True, help="Path to a UTF-8 text file, or '-' for stdin")
    render.add_argument('--output', required=False, help='Output file or directory')
    render.add_argument('--filename', required=False, help='Explicit PDF filename')
    render.add_argument('--title', required=False, help='Banner title for the first page')
    render.add_argument('--banner', action='store_true', help='Add the title banner with a generation time')
    render.set_defaults(func=cmd_render)

    serve = sub.add_parser('serve', help='Run the HTTP PDF endpoint')
    serve.add_argument('--host', required=False)
    serve.add_argument('--port', type=int, required=False)
    serve.set_defaults(func=cmd_serve)

    return parser


def main(argv: list[str] | None = None) -> int:
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    return int(args.func(args))


if __name__ == '__main__':
    raise SystemExit(main())
