"""
HTTP API for the Zulu morphological analyser (Flask).

ENDPOINTS
=========

GET  /api/health          Service status and feature list
POST /api/process-text    {"text": "..."} -> analysis of one text
POST /api/process-batch   {"texts": ["...", ...]} -> one record per text
POST /api/process-files   multipart "files" (TXT, PDF, DOC/DOCX, JSON, CSV)
POST /api/export          {"data": [...], "format": "csv|json|txt"} -> download

Errors are returned as {"success": false, "error": "..."} with status 400 for
bad input, 413 for oversized requests and 500 for anything unexpected.
"""

import logging

from flask import Flask, Response, jsonify, request
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge

from .batch import AnalysisService, UploadedFile, utc_timestamp
from .config import ANALYZER_VERSION, SERVICE_NAME, ServiceConfig
from .errors import ExportFormatError, InputValidationError
from .export import export_results
from .logging_config import setup_logging

logger = logging.getLogger(__name__)

FEATURES = [
    "Text extraction from PDF, DOC, TXT, JSON, CSV",
    "Zulu morphological analysis",
    "Batch file processing",
    "Multi-format export",
]


def _json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def create_app(config: ServiceConfig = None, service: AnalysisService = None) -> Flask:
    """
    Build the Flask application.

    Args:
        config: Service settings (defaults to ServiceConfig()).
        service: Analysis service to route requests to; built from config
            when omitted.
    """
    config = config or ServiceConfig()
    service = service or AnalysisService(config)

    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = config.max_request_size
    app.config["ZULUMORPH"] = config

    @app.after_request
    def add_cors_headers(response):
        response.headers["Access-Control-Allow-Origin"] = "*"
        response.headers["Access-Control-Allow-Headers"] = "Content-Type"
        response.headers["Access-Control-Allow-Methods"] = "GET, POST, OPTIONS"
        return response

    # --- Error handlers ---

    @app.errorhandler(InputValidationError)
    @app.errorhandler(ExportFormatError)
    def handle_bad_request(error):
        logger.warning(f"Rejected request to {request.path}: {error}")
        return jsonify({"success": False, "error": str(error)}), 400

    @app.errorhandler(RequestEntityTooLarge)
    def handle_too_large(error):
        return jsonify({
            "success": False,
            "error": f"Request exceeds the maximum size of {config.max_request_size} bytes",
        }), 413

    @app.errorhandler(Exception)
    def handle_unexpected(error):
        if isinstance(error, HTTPException):
            return jsonify({"success": False, "error": error.description}), error.code
        logger.error(f"Unhandled error on {request.path}: {error}", exc_info=True)
        return jsonify({
            "success": False,
            "error": "Internal server error",
            "message": str(error),
        }), 500

    # --- Routes ---

    @app.route("/api/health", methods=["GET"])
    def health():
        return jsonify({
            "status": "healthy",
            "service": SERVICE_NAME,
            "version": ANALYZER_VERSION,
            "timestamp": utc_timestamp(),
            "features": FEATURES,
        })

    @app.route("/api/process-text", methods=["POST"])
    def process_text():
        data = _json_body()
        return jsonify(service.process_text(data.get("text")))

    @app.route("/api/process-batch", methods=["POST"])
    def process_batch():
        data = _json_body()
        return jsonify(service.process_batch(data.get("texts")))

    @app.route("/api/process-files", methods=["POST"])
    def process_files():
        uploads = [
            UploadedFile(
                filename=storage.filename or "unnamed",
                data=storage.read(),
                mimetype=storage.mimetype or "application/octet-stream",
            )
            for storage in request.files.getlist("files")
        ]
        return jsonify(service.process_files(uploads))

    @app.route("/api/export", methods=["POST"])
    def export():
        data = _json_body()
        document = export_results(data.get("data"), data.get("format"))
        return Response(
            document.content,
            mimetype=document.content_type,
            headers={"Content-Disposition": f'attachment; filename="{document.filename}"'},
        )

    return app


def main(config: ServiceConfig = None):
    """Configure logging and run the development server."""
    config = config or ServiceConfig.from_env()
    setup_logging(log_file=config.log_file, debug=config.debug)

    app = create_app(config)
    logger.info(f"Zulu NLP Processing Server running on port {config.port}")
    logger.info(f"Health check: http://localhost:{config.port}/api/health")
    app.run(host=config.host, port=config.port, debug=config.debug)


if __name__ == "__main__":
    main()
