class MonetizationError(Exception):
    """
    Base exception for all gating and metering domain errors.
    """
    pass


class StorageUnavailableError(MonetizationError):
    """
    Raised when the persistence backend cannot be read or written.

    Never interpreted as "no usage yet".
    """
    pass


class InvalidUserIdError(MonetizationError):
    """
    Raised when a user identifier is not a positive integer.
    """
    pass


class InvalidFeatureNameError(MonetizationError):
    """
    Raised when a feature name is empty or not a string.
    """
    pass


class InvalidMonetizationModelError(MonetizationError):
    """
    Raised when an admin tries to activate an unknown monetization model.
    """
    pass


class FeatureBlockedError(MonetizationError):
    """
    Raised by the feature gate when the policy denies access.
    """

    def __init__(self, decision):
        self.decision = decision
        super().__init__(
            f"Access to '{decision.feature_name}' blocked "
            f"({decision.reason.value})"
        )
