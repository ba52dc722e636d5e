"""Base model for all data models in the billing core.

This module provides a base Pydantic model with common configuration
shared by money, payment, and time entry models.
"""

from pydantic import BaseModel, ConfigDict


class BaseDataModel(BaseModel):
    """Base class for all data models.

    Provides common configuration for:
    - Validation with type checking
    - Serialization to/from dictionaries
    - Arbitrary types support for dates, datetimes, decimals

    Subclasses that represent computed values (rounded entries, billing
    states) override ``frozen`` so they cannot be mutated after creation.

    Example:
        >>> class Rate(BaseDataModel):
        ...     code: str
        ...     hours: int
        >>> rate = Rate(code="STD", hours=8)
        >>> rate.model_dump()
        {'code': 'STD', 'hours': 8}
    """

    model_config = ConfigDict(
        # Allow arbitrary types like Decimal, date, tzinfo
        arbitrary_types_allowed=True,
        # Validate on assignment to catch errors early
        validate_assignment=True,
        strict=False,
        # Unknown fields are a caller error
        extra="forbid",
        frozen=False,
    )
