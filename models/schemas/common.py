from marshmallow import ValidationError


def not_blank(max_len: int):
    """Validator: non-empty after strip and at most max_len characters."""
    def _validate(value: str) -> None:
        if not value.strip():
            raise ValidationError("Must not be blank.")
        if len(value) > max_len:
            raise ValidationError(f"Must be at most {max_len} characters.")
    return _validate


def norm_email(v):
    return v.strip().lower() if isinstance(v, str) else v
