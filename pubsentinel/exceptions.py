"""Custom exceptions for pubsentinel."""


class PubSentinelError(Exception):
    """Base exception for all pubsentinel errors."""


class ManifestNotFoundError(PubSentinelError):
    """Raised when no readable pubspec.yaml exists for a project."""

    def __init__(self, project_dir: str):
        self.project_dir = project_dir
        super().__init__(f"No pubspec.yaml found in {project_dir}")


class RegistryError(PubSentinelError):
    """Raised when a registry lookup fails (transport, status or payload)."""

    def __init__(self, package: str, reason: str):
        self.package = package
        self.reason = reason
        super().__init__(f"registry lookup failed for '{package}': {reason}")
