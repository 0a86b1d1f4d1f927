from .request_validators import validate_model, validate_id, validate_ids

__all__ = ["validate_model", "validate_id", "validate_ids"]
