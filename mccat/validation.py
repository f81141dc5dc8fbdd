"""
This module defines the JSON schemas for validating a session request
built from the command line before any socket is opened.
"""

from jsonschema import ValidationError, validate

MODES = ("listen", "send", "ping")

# Base schema for any request, requiring a known 'mode' field.
base_request_schema = {
    "type": "object",
    "properties": {
        "mode": {"type": "string", "enum": list(MODES)},
    },
    "required": ["mode"],
}

# Schema for the endpoint and tuning values every mode needs.
session_schema = {
    "type": "object",
    "properties": {
        "mode": {"type": "string"},
        "address": {"type": "string", "minLength": 1},
        "port": {"type": "integer", "minimum": 0, "maximum": 65535},
        "buffer_size": {"type": "integer", "minimum": 1, "maximum": 65535},
        "ping_interval": {
            "type": "number",
            "exclusiveMinimum": 0,
            "maximum": 3600,
        },
    },
    "required": ["mode", "address", "port"],
}


class RequestValidator:
    """A validator for session requests."""

    def validate(self, request):
        """
        Validates a request against the base schema and the session schema.

        Args:
            request (dict): The request assembled by the CLI. A textual
                            'port' is converted to an integer first.

        Returns:
            tuple(dict, str|None): A tuple of (validated_request, error_message).
                                   If validation fails, the request is None.
        """
        try:
            validate(instance=request, schema=base_request_schema)
        except ValidationError as e:
            return None, f"Invalid request: {e.message}"

        request = dict(request)
        port = request.get("port")
        if isinstance(port, str):
            # Plain ASCII digits only, so "5_000", "+5" and "-0" are rejected.
            if not (port.isascii() and port.isdigit()):
                return None, f"invalid port number: {port!r}"
            request["port"] = int(port, 10)

        try:
            validate(instance=request, schema=session_schema)
            return request, None
        except ValidationError as e:
            return None, f"Invalid {request['mode']} request: {e.message}"
