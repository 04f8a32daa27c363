from flask import Blueprint, current_app, jsonify
from flask_login import login_required, current_user
from authlib.jose import jwt
from authlib.jose.errors import JoseError
from app.models import User
from app import db, login_manager
import logging

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


def _bearer_token(request):
    """Return the raw token from an 'Authorization: Bearer <token>' header, or None."""
    header = (request.headers.get("Authorization") or "").strip()
    if not header.lower().startswith("bearer "):
        return None
    token = header.split(" ", 1)[1].strip()
    return token or None


def decode_token(token):
    """
    Verify a bearer token and return its claims.

    Args:
        token: Encoded JWT as issued by the external auth service

    Returns:
        dict: Validated claims, or None if the token is invalid or expired
    """
    secret = current_app.config.get("JWT_SECRET")
    if not secret:
        logger.error("JWT_SECRET is not configured; rejecting bearer token")
        return None

    try:
        claims = jwt.decode(token, secret)
        claims.validate()
    except JoseError as e:
        logger.info(f"Rejected bearer token: {e}")
        return None
    except ValueError as e:
        logger.info(f"Malformed bearer token: {e}")
        return None

    algorithm = current_app.config.get("JWT_ALGORITHM", "HS256")
    if claims.header.get("alg") != algorithm:
        logger.info(f"Rejected bearer token with algorithm {claims.header.get('alg')}")
        return None
    return claims


@login_manager.request_loader
def load_user_from_request(request):
    """Resolve the current user from the bearer token's 'sub' claim."""
    token = _bearer_token(request)
    if token is None:
        return None

    claims = decode_token(token)
    if claims is None:
        return None

    try:
        user_id = int(claims.get("sub"))
    except (TypeError, ValueError):
        logger.info("Bearer token has no usable subject")
        return None

    return db.session.get(User, user_id)


@auth_bp.route("/me")
@login_required
def me():
    """Identity check for clients holding a token."""
    return jsonify({
        "id": str(current_user.id),
        "email": current_user.email,
        "timeZone": current_user.time_zone,
    })
