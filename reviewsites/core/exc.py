"""reviewsites exception classes."""


class ReviewSitesError(Exception):
    """Generic errors."""

    def __init__(self, msg):
        Exception.__init__(self, msg)
        self.msg = msg

    def __str__(self):
        return self.msg


class ReviewConfigError(ReviewSitesError):
    """Tool configuration is missing or invalid."""
    pass


class SiteExistsError(ReviewSitesError):
    """Site directory already exists and is not empty."""
    pass


class SiteNotFoundError(ReviewSitesError):
    """No site directory for the requested identifier."""
    pass


class SourceCheckoutError(ReviewSitesError):
    """Branch missing on the remote or clone failed."""
    pass


class SnapshotError(ReviewSitesError):
    """Exporting the base database failed."""
    pass


class DatabaseCreateError(ReviewSitesError):
    """Site database could not be created."""
    pass


class DatabaseImportError(ReviewSitesError):
    """Dump could not be imported into the site database."""
    pass


class FilesystemCollisionError(ReviewSitesError):
    """File storage destination already exists."""
    pass


class SiteConfigError(ReviewSitesError):
    """Application configuration could not be written."""
    pass


class VerificationError(ReviewSitesError):
    """Live application configuration does not match the site."""
    pass


class UpdateError(ReviewSitesError):
    """Fetching or applying upstream changes failed."""
    pass


class HookError(ReviewSitesError):
    """A hook script failed."""
    pass


class UserAbortedError(ReviewSitesError):
    """Operator declined a confirmation prompt."""
    pass


class SiteFilesystemError(ReviewSitesError):
    """Site directory or file storage could not be written or removed."""
    pass


class PublishError(ReviewSitesError):
    """Webroot links could not be rebuilt."""
    pass
