from .coerce import coerce_value, json_text, to_json

__all__ = ["coerce_value", "json_text", "to_json"]
