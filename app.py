import atexit
from datetime import datetime, timezone

from flask import Flask, jsonify
from flask_cors import CORS
from pydantic import ValidationError
from pymongo import MongoClient
from pymongo.errors import PyMongoError
from werkzeug.exceptions import HTTPException

from cache import TTLCache
from config import COLLECTION_NAME, DB_NAME, MONGODB_URI, PORT, USERS_COLLECTION
from errors import AppError
from extensions import get_db
from internships import internships_bp
from log import configure_app_logging, get_logger
from recommender import RecommendationService
from scoring_client import ScoringClient
from users import users_bp
from wire import decode_msgpack_body

log = get_logger(__name__)


def create_app(db=None, cache=None, scoring_client=None):
    """Build the Flask app.

    The Mongo database, the cache and the scoring client can be injected;
    anything left out is created from configuration.
    """
    app = Flask(__name__)
    CORS(app, resources={r"/*": {"origins": "*"}},
         methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
         allow_headers=["Content-Type", "Authorization"])

    if db is None:
        db = MongoClient(MONGODB_URI)[DB_NAME]
    cache = cache if cache is not None else TTLCache()
    scoring_client = scoring_client or ScoringClient()

    configure_app_logging(app)

    app.extensions["mongo_db"] = db
    app.extensions["cache"] = cache
    recommender = RecommendationService(
        db[USERS_COLLECTION], db[COLLECTION_NAME], cache, scoring_client
    )
    app.extensions["recommender"] = recommender
    atexit.register(recommender.close, False)

    app.before_request(decode_msgpack_body)
    app.register_blueprint(users_bp)
    app.register_blueprint(internships_bp)
    _register_error_handlers(app)
    _register_status_routes(app)
    return app


def _register_error_handlers(app):
    @app.errorhandler(AppError)
    def handle_app_error(e):
        return jsonify({"error": e.message}), e.status_code

    @app.errorhandler(ValidationError)
    def handle_validation_error(e):
        return jsonify({"error": [err["msg"] for err in e.errors()]}), 400

    @app.errorhandler(404)
    def handle_not_found(e):
        return jsonify({"error": "Route not found"}), 404

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        if isinstance(e, HTTPException):
            return jsonify({"error": e.description}), e.code
        log.exception("Unhandled error")
        return jsonify({"error": "Something went wrong!"}), 500


def _register_status_routes(app):
    @app.route("/")
    def home():
        return jsonify({
            "message": "Internship Recommendation API",
            "status": "Server is running",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        })

    @app.route("/health")
    def health():
        return jsonify({"status": "Server is running", "timestamp": datetime.now(timezone.utc).isoformat()})

    @app.route("/db-status")
    def db_status():
        db = get_db()
        try:
            db.command("ping")
        except PyMongoError as e:
            return jsonify({
                "status": "Disconnected",
                "error": str(e),
                "message": "Server is running, database connection pending",
                "timestamp": datetime.now(timezone.utc).isoformat(),
            })
        return jsonify({
            "status": "Connected",
            "database": db.name,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        })


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=PORT, debug=True)
