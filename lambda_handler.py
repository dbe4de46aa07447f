"""
AWS Lambda handler for the Auction Arrears Engine API.

This is the production entry point for AWS Lambda deployments.
For local development, use main.py (Flask app) instead.
"""

import json
import logging

from arrears_engine import PortfolioProcessor
from arrears_engine.settings import AppSettings

# Configure logging
logger = logging.getLogger()
logger.setLevel(logging.INFO)

# Environment (dev, staging, prod)
ENVIRONMENT = AppSettings.from_env().environment

# Initialize processor (reused across warm invocations)
processor = PortfolioProcessor()

# CORS headers for API Gateway
CORS_HEADERS = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type,Authorization",
    "Access-Control-Allow-Methods": "GET,POST,OPTIONS",
}


def lambda_handler(event, context):
    """
    Main Lambda entry point.

    Handles API Gateway events for:
    - GET /health
    - GET /api
    - POST /process_portfolio
    - POST /interest_preview
    - OPTIONS (CORS preflight)
    """
    # Handle CORS preflight
    http_method = event.get("httpMethod") or event.get("requestContext", {}).get("http", {}).get("method", "")
    if http_method == "OPTIONS":
        return {"statusCode": 200, "headers": CORS_HEADERS, "body": ""}

    # Get path (supports both REST API and HTTP API formats)
    path = event.get("path") or event.get("rawPath", "")

    # Route to appropriate handler
    if path == "/health" and http_method == "GET":
        return handle_health()
    elif path == "/process_portfolio" and http_method == "POST":
        return handle_process_portfolio(event)
    elif path == "/interest_preview" and http_method == "POST":
        return handle_interest_preview(event)
    elif path == "/api" and http_method == "GET":
        return handle_api_info()
    else:
        return _response(404, {"error": "Not found", "path": path})


def handle_health():
    """Health check endpoint."""
    return _response(200, {"status": "healthy", "environment": ENVIRONMENT})


def handle_api_info():
    """API information endpoint."""
    return _response(
        200,
        {
            "status": "ok",
            "message": "Auction Arrears Engine API",
            "version": "1.0",
            "environment": ENVIRONMENT,
            "runtime": "AWS Lambda",
            "endpoints": {
                "process_portfolio": "/process_portfolio [POST]",
                "interest_preview": "/interest_preview [POST]",
                "health": "/health [GET]",
            },
        },
    )


def handle_process_portfolio(event):
    """Classify all bidders of the posted auctions."""
    return _handle_json(event, processor.process_from_dict, "portfolio")


def handle_interest_preview(event):
    """Late interest on a single amount."""
    return _handle_json(event, processor.interest_preview_from_dict, "interest preview")


def _handle_json(event, operation, label):
    try:
        input_data = _parse_body(event)
        if input_data is None:
            return _response(400, {"error": "No input data provided", "status": "failed"})

        logger.info(f"Processing {label}")

        result = operation(input_data)

        logger.info(f"Processed {label} successfully")

        return _response(200, result)

    except json.JSONDecodeError as e:
        logger.error(f"JSON parse error: {str(e)}")
        return _response(400, {"error": f"Invalid JSON: {str(e)}", "status": "failed"})

    except (ValueError, KeyError, TypeError) as e:
        # Validation errors from engine (missing fields, invalid types, etc.)
        logger.error(f"Validation error: {str(e)}")
        return _response(400, {"error": f"Validation error: {str(e)}", "status": "validation_failed"})

    except Exception as e:
        # Unexpected errors - log details but return generic message to avoid information disclosure
        logger.error(f"Unexpected processing error: {str(e)}", exc_info=True)
        return _response(500, {"error": "An unexpected error occurred during processing", "status": "failed"})


def _parse_body(event):
    body = event.get("body", "")
    if not isinstance(body, str):
        return body or None
    if not body:
        return None
    # Handle base64 encoded body (API Gateway)
    if event.get("isBase64Encoded"):
        import base64

        body = base64.b64decode(body).decode("utf-8")
    return json.loads(body)


def _response(status_code, payload):
    return {"statusCode": status_code, "headers": CORS_HEADERS, "body": json.dumps(payload)}
