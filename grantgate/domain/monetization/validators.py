from typing import Any

from grantgate.domain.monetization.errors import (
    InvalidFeatureNameError,
    InvalidUserIdError,
)


def validate_user_id(user_id: Any) -> int:
    """
    User ids are positive integers. Booleans are rejected even though
    they are ints in Python.
    """
    if isinstance(user_id, bool) or not isinstance(user_id, int):
        raise InvalidUserIdError(f"User id must be an integer, got {user_id!r}")

    if user_id <= 0:
        raise InvalidUserIdError(f"User id must be positive, got {user_id}")

    return user_id


def validate_feature_name(feature_name: Any) -> str:
    if not isinstance(feature_name, str):
        raise InvalidFeatureNameError(
            f"Feature name must be a string, got {type(feature_name).__name__}"
        )

    if not feature_name.strip():
        raise InvalidFeatureNameError("Feature name must not be empty")

    return feature_name
