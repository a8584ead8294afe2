"""
Report PDF Server - Flask front for the report layout engine
============================================================
Accepts dictated report text produced upstream (transcription and text
generation happen elsewhere) and answers with a paginated PDF.

Endpoints:
  - GET  /health
  - POST /api/generate-pdf   body: {"report": "...", "filename": "optional.pdf"}
"""

from __future__ import annotations

import logging
import traceback
from datetime import datetime, timezone

from flask import Flask, Response, jsonify, request, stream_with_context
from flask_cors import CORS

from reportpdf.config import Settings, get_settings
from reportpdf.errors import InvalidInput, LayoutOverflow
from reportpdf.report.emitter import PDF_MEDIA_TYPE, iter_pdf_chunks, suggested_filename
from reportpdf.report.render import render_document, validate_report_text
from reportpdf.report.typography import build_layout


logger = logging.getLogger(__name__)


def _banner_timestamp() -> str:
    return datetime.now().strftime('%Y-%m-%d %H:%M:%S')


def create_app(settings: Settings | None = None) -> Flask:
    settings = settings or get_settings()
    layout = build_layout(settings)

    app = Flask(__name__)
    origins = settings.cors_origin_list()
    CORS(app, origins=origins, send_wildcard=origins == '*')

    @app.errorhandler(404)
    def not_found(_error):
        return jsonify({'error': 'Route not found'}), 404

    @app.errorhandler(405)
    def method_not_allowed(_error):
        return jsonify({'error': 'Method not allowed'}), 405

    @app.route('/health', methods=['GET'])
    def health():
        return jsonify(
            {
                'status': 'ok',
                'service': settings.app_name,
                'timestamp': datetime.now(timezone.utc).isoformat(),
            }
        ), 200

    @app.route('/api/generate-pdf', methods=['POST'])
    def generate_pdf():
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            return jsonify({'error': 'Invalid JSON request'}), 400

        try:
            report = validate_report_text(payload.get('report'), max_chars=settings.max_report_chars)
        except InvalidInput as e:
            return jsonify({'error': str(e)}), 400

        filename = suggested_filename(payload.get('filename'), prefix=settings.pdf_filename_prefix)

        title = None
        generated_at = None
        if settings.pdf_include_banner:
            title = settings.pdf_document_title
            generated_at = _banner_timestamp()

        try:
            document = render_document(
                report,
                settings=settings,
                layout=layout,
                title=title,
                generated_at=generated_at,
            )
            chunks = iter_pdf_chunks(document, settings.pdf_stream_chunk_size)
        except LayoutOverflow as e:
            logger.warning('Layout overflow for %s: %s', filename, e)
            return jsonify({'error': 'Report cannot be laid out', 'details': str(e)}), 422
        except Exception as e:
            logger.error('PDF generation error: %s', e)
            logger.error(traceback.format_exc())
            return jsonify({'error': 'PDF generation failed', 'details': str(e)}), 500

        logger.info('Streaming %s (%d page(s))', filename, document.page_count)
        return Response(
            stream_with_context(chunks),
            mimetype=PDF_MEDIA_TYPE,
            headers={'Content-Disposition': f'attachment; filename="{filename}"'},
        )

    return app
