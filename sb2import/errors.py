"""Exceptions raised while importing a Scratch 2.0 project."""


class ProjectImportError(Exception):
    """Exception raised when a project document or archive cannot be imported."""

    def __init__(self, message: str, detail: str = ""):
        self.message = message
        self.detail = detail
        super().__init__(message)

    def __str__(self) -> str:
        if self.detail:
            return f"{self.message} ({self.detail})"
        return self.message


class AssetLoadError(ProjectImportError):
    """Raised by an asset loader when a costume or sound payload is unavailable."""
