from flask import Flask, request, jsonify
from flask_cors import CORS
from arrears_engine import PortfolioProcessor
from arrears_engine.settings import AppSettings
import logging

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

settings = AppSettings.from_env()

app = Flask(__name__)

# Enable CORS for all routes (dashboard and report generators call the API)
CORS(app)

# Initialize the portfolio processor
processor = PortfolioProcessor()


@app.route("/api", methods=["GET"])
def api_info():
    """API information endpoint"""
    return jsonify({
        "status": "ok",
        "message": "Auction Arrears Engine API",
        "version": "1.0",
        "environment": settings.environment,
        "endpoints": {
            "process_portfolio": "/process_portfolio [POST]",
            "interest_preview": "/interest_preview [POST]",
            "health": "/health [GET]"
        }
    }), 200


@app.route("/health", methods=["GET"])
def health():
    """Health check for monitoring"""
    return jsonify({"status": "healthy"}), 200


@app.route("/process_portfolio", methods=["POST"])
def process_portfolio():
    """
    Classify every bidder of the given auctions and roll up portfolio totals
    """
    try:
        # Get input data
        input_data = request.get_json(force=True, silent=True)

        if not input_data:
            return jsonify({
                "error": "No input data provided",
                "status": "failed"
            }), 400

        # Log request
        auction_count = len(input_data.get("auctions") or []) if isinstance(input_data, dict) else 0
        logger.info(f"Processing portfolio: {auction_count} auctions")

        # Process through engine
        result = processor.process_from_dict(input_data)

        logger.info(f"Portfolio processed successfully: {result['totals']['bidders']} bidders")

        return jsonify(result), 200

    except ValueError as e:
        # Validation errors from engine
        logger.error(f"Validation error: {str(e)}")
        return jsonify({
            "error": str(e),
            "status": "validation_failed"
        }), 400

    except Exception as e:
        # Unexpected errors
        logger.error(f"Processing error: {str(e)}")
        return jsonify({
            "error": str(e),
            "status": "failed"
        }), 500


@app.route("/interest_preview", methods=["POST"])
def interest_preview():
    """Late interest on a single amount"""
    try:
        input_data = request.get_json(force=True, silent=True)
        result = processor.interest_preview_from_dict(input_data)
        return jsonify(result), 200

    except (ValueError, TypeError) as e:
        logger.error(f"Validation error: {str(e)}")
        return jsonify({
            "error": str(e),
            "status": "validation_failed"
        }), 400


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=settings.port, debug=False)
