class LeagueHubError(Exception):
    """Base error for the league dashboard"""


class ConfigError(LeagueHubError):
    """Dashboard configuration is missing or malformed"""


class AuthError(LeagueHubError):
    """Identity provider rejected a sign-in or token refresh"""


class SchemaError(LeagueHubError):
    """A backend document does not match the expected shape"""


class SubscriptionError(LeagueHubError):
    """A live query stopped delivering updates"""
