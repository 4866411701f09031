"""
app/validators package marker.
"""

from app.validators.mapping_validator import HeaderValidator, MappingErrorDetail, SchemaMismatchError

__all__ = [
    "HeaderValidator",
    "MappingErrorDetail",
    "SchemaMismatchError",
]
