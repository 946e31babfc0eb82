class StoreKeys:
    """
    Centralized namespace and key builders.
    """

    # ─────────────────────────────────────────────
    # Namespaces
    # ─────────────────────────────────────────────

    FEATURE_USAGE = "featureUsage"
    APP_CONFIG = "appConfig"
    SUBSCRIPTIONS = "subscriptions"
    FEATURE_PURCHASES = "featurePurchases"

    # ─────────────────────────────────────────────
    # Keys
    # ─────────────────────────────────────────────

    CONFIG = "config"

    @staticmethod
    def user(user_id: int) -> str:
        return str(user_id)
