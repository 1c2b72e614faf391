"""Auth manager -- registry and dispatcher for auth plugins.

The :class:`AuthManager` maps auth-type strings (``"api_key"``,
``"bearer"``, ``"oauth2_client_credentials"``, ...) to concrete
:class:`~reactiveapi.auth.base.AuthPlugin` instances and exposes a single
:meth:`~AuthManager.setup` method that
:meth:`~reactiveapi.client.api.JSONReactiveAPI.from_profile` calls.

For most use cases, call :func:`create_default_manager` to get a manager
pre-loaded with every built-in plugin.
"""

from __future__ import annotations

from reactiveapi.auth.base import AuthPlugin, AuthSetup
from reactiveapi.exceptions import AuthError
from reactiveapi.models import Profile


class AuthManager:
    """Registry and dispatcher for authentication plugins.

    Example::

        manager = AuthManager()
        manager.register(BearerAuthPlugin())
        setup = manager.setup(profile)
    """

    def __init__(self) -> None:
        self._plugins: dict[str, AuthPlugin] = {}

    def register(self, plugin: AuthPlugin) -> None:
        """Register *plugin* under its ``auth_type``, replacing any previous one."""
        self._plugins[plugin.auth_type] = plugin

    def get_plugin(self, auth_type: str) -> AuthPlugin:
        """Retrieve a registered plugin by its auth type identifier.

        Raises:
            AuthError: If no plugin is registered for *auth_type*.
        """
        plugin = self._plugins.get(auth_type)
        if plugin is None:
            available = ", ".join(sorted(self._plugins)) or "(none)"
            raise AuthError(
                f"No auth plugin registered for type '{auth_type}'. "
                f"Available types: {available}"
            )
        return plugin

    def setup(self, profile: Profile) -> AuthSetup:
        """Build the auth wiring for *profile*.

        Returns:
            The plugin's :class:`~reactiveapi.auth.base.AuthSetup`, or an
            empty one when the profile has no auth section.

        Raises:
            AuthError: If the auth type has no registered plugin, or the
                plugin rejects the configuration.
        """
        if profile.auth is None:
            return AuthSetup()
        return self.get_plugin(profile.auth.type).setup(profile.auth)

    def list_types(self) -> list[str]:
        return sorted(self._plugins.keys())


def create_default_manager() -> AuthManager:
    """Create an :class:`AuthManager` pre-loaded with all built-in plugins.

    Registered types: ``api_key``, ``bearer``, ``basic``,
    ``oauth2_client_credentials``.
    """
    from reactiveapi.auth.oauth2 import OAuth2ClientCredentialsPlugin
    from reactiveapi.auth.static import APIKeyAuthPlugin, BasicAuthPlugin, BearerAuthPlugin

    manager = AuthManager()
    manager.register(APIKeyAuthPlugin())
    manager.register(BearerAuthPlugin())
    manager.register(BasicAuthPlugin())
    manager.register(OAuth2ClientCredentialsPlugin())
    return manager
