from bionicbook.validation.validator import BaseValidator, LengthRatioValidator, ValidationResult

__all__ = ["BaseValidator", "LengthRatioValidator", "ValidationResult"]
