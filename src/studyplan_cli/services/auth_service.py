"""Service for handling authentication-related operations.

Signing in itself happens outside the planner; this service only answers
whether a session is stored and for which user.
"""

from studyplan_cli.services.config_service import get_config_service


class AuthService:
    """Service for handling authentication-related operations."""

    @staticmethod
    def is_authenticated() -> bool:
        """Check if the user is authenticated."""
        return get_config_service().load_credentials() is not None

    @staticmethod
    def current_user_id() -> str | None:
        """Id of the signed-in user, or None."""
        credentials = get_config_service().load_credentials()
        return credentials["user_id"] if credentials else None

    @staticmethod
    def access_token() -> str | None:
        credentials = get_config_service().load_credentials()
        return credentials["access_token"] if credentials else None
