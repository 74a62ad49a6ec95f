def validate_non_negative_integer(type_: object, value: int) -> None:
    if value < 0:
        raise ValueError("Value must be a non-negative integer")


def validate_gain_factor(type_: object, factor: float) -> None:
    """Validate that a gain factor is positive."""
    if not factor > 0.0:
        raise ValueError("Gain factor must be greater than 0.0")
