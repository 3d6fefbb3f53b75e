from flask import request, jsonify
from pydantic import ValidationError


def validation_details(exc: ValidationError):
    return [
        {"field": ".".join(str(p) for p in err["loc"]) or "body", "message": err["msg"]}
        for err in exc.errors()
    ]


def parse_body(schema):
    """
    Validate the JSON body against a pydantic schema.
    Returns (model, None) or (None, (response, 400)).
    """
    data = request.get_json(silent=True)
    if data is None:
        data = {}
    try:
        return schema.model_validate(data), None
    except ValidationError as exc:
        return None, (jsonify(error="Invalid request", details=validation_details(exc)), 400)
