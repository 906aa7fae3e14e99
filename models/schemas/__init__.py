"""marshmallow request and response schemas."""
