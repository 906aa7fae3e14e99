from flask import Blueprint, current_app, g

from utils.decorators import jwt_optional

bp = Blueprint("health", __name__)


@bp.get("/")
def health():
    """
    Health check
    ---
    tags:
      - Health
    responses:
      200:
        description: API is up
        schema:
          type: object
          properties:
            status:
              type: string
              example: OK
            environment:
              type: string
              example: development
    """
    return {
        "status": "OK",
        "message": "Bookmark Management API is running",
        "environment": current_app.config["APP_ENV"],
    }, 200


@bp.get("/api")
@jwt_optional()
def welcome():
    """
    API entry point; names the caller when a valid bearer token is sent
    ---
    tags:
      - Health
    responses:
      200:
        description: Welcome message
    """
    body = {
        "message": "Welcome to the Bookmark Management API",
        "version": "1.0.0",
        "docs": "/apidocs/",
    }
    username = g.get("username")
    if username:
        body["user"] = username
    return body, 200
