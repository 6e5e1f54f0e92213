# app/services/document_schema.py
from jsonschema import validate, ValidationError

# Envelope of the persisted document. Record contents are checked by
# ApplicationRecord; this only guards the shape the store relies on.
DOCUMENT_SCHEMA = {
    "type": "object",
    "required": ["applications"],
    "properties": {
        "applications": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["id"],
                "properties": {
                    "id": {"type": "string", "minLength": 1},
                    "dateReceived": {"type": "string"},
                },
            },
        }
    },
}


def validate_document(document: dict):
    try:
        validate(instance=document, schema=DOCUMENT_SCHEMA)
        return True, None
    except ValidationError as e:
        return False, e.message
