from flask import Blueprint, g, jsonify
from pydantic import ValidationError

from auth import create_token, hash_password, token_required, verify_password
from errors import ConflictError, NotFoundError, UnauthenticatedError, ValidationFailed
from extensions import get_recommender, users_col
from log import get_logger
from models import LoginModel, ProfileUpdateModel, RegisterModel, to_object_id
from wire import get_body, respond

log = get_logger(__name__)

users_bp = Blueprint("users", __name__, url_prefix="/users")


def _validation_messages(e: ValidationError) -> list:
    return [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()]


@users_bp.route("/register", methods=["POST"])
def register_user():
    try:
        data = RegisterModel(**get_body())
    except ValidationError as e:
        return jsonify({
            "error": "Username, email, password, and confirmPassword are required.",
            "details": _validation_messages(e),
        }), 400

    if data.password != data.confirmPassword:
        raise ValidationFailed("Passwords do not match.")

    users = users_col()
    if users.find_one({"$or": [{"email": data.email}, {"username": data.username}]}):
        raise ConflictError("User already exists.")

    result = users.insert_one({
        "username": data.username,
        "email": data.email,
        "password": hash_password(data.password),
        "skills": [],
        "sectors": [],
        "education": "",
        "location": "",
    })
    log.info("Registered user %s", result.inserted_id)
    return respond({"message": "User registered successfully", "user_id": str(result.inserted_id)}, 201)


@users_bp.route("/login", methods=["POST"])
def login_user():
    try:
        data = LoginModel(**get_body())
    except ValidationError:
        raise ValidationFailed("Email and password are required.")

    user = users_col().find_one({"email": data.email})
    if not user or not verify_password(data.password, user.get("password", "")):
        raise UnauthenticatedError("Invalid credentials.")

    return respond({"token": create_token(user)})


def _current_user_filter() -> dict:
    object_id = to_object_id(g.current_user["userId"])
    if object_id is None:
        raise NotFoundError("User not found.")
    return {"_id": object_id}


@users_bp.route("/profile", methods=["GET"])
@token_required
def get_profile():
    user = users_col().find_one(_current_user_filter(), {"password": 0})
    if not user:
        raise NotFoundError("User not found")

    return respond({
        "user_id": str(user["_id"]),
        "username": user.get("username"),
        "email": user.get("email"),
        "skills": user.get("skills") or [],
        "sectors": user.get("sectors") or [],
        "education": user.get("education") or "",
        "location": user.get("location") or "",
    })


@users_bp.route("/profile/update", methods=["POST"])
@token_required
def update_profile():
    try:
        update = ProfileUpdateModel(**get_body())
    except ValidationError as e:
        return jsonify({"error": "Invalid profile fields", "details": _validation_messages(e)}), 400

    fields = update.changes()
    if not fields:
        raise ValidationFailed("At least one field (skills, sectors, education, location) is required")

    user_filter = _current_user_filter()
    users = users_col()
    if not users.find_one(user_filter, {"_id": 1}):
        raise NotFoundError("User not found.")

    result = users.update_one(user_filter, {"$set": fields})
    if result.matched_count == 0:
        raise NotFoundError("User not found.")

    identity = g.current_user["userId"]
    log.info("Updated profile for user %s: %s", identity, sorted(fields))
    cleared = get_recommender().invalidate_user(identity)

    return respond({
        "message": "Profile updated successfully",
        "updated_fields": list(fields),
        "modified_count": result.modified_count,
        "cleared_cache_entries": cleared,
    })
