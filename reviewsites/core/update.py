"""reviewsites update engine"""
from reviewsites.core.exc import UpdateError
from reviewsites.core.git import RSGit
from reviewsites.core.logging import Log
from reviewsites.core.shellexec import CommandExecutionError


class UpdateEngine:
    """Bring a site checkout up to its upstream branch tip"""

    def __init__(self, app, git=None):
        self.app = app
        self.git = git or RSGit(app)

    def check(self, site):
        """Summaries of upstream commits not yet in the checkout.

        An empty list means the site is up to date.
        """
        try:
            self.git.fetch(site.source_root, site.branch_name)
            return self.git.pending_commits(site.source_root,
                                            site.branch_name)
        except CommandExecutionError as e:
            raise UpdateError("Unable to check {0} for updates: {1}"
                              .format(site.site_id, e))

    def apply(self, site):
        """Drop local changes, then fast-forward to the remote tip"""
        try:
            self.git.reset_hard(site.source_root)
            self.git.fast_forward(site.source_root, site.branch_name)
        except CommandExecutionError as e:
            raise UpdateError("Unable to update {0}: {1}"
                              .format(site.site_id, e))
        Log.debug(self.app, "Updated {0} to {1}".format(
            site.site_id, site.branch_name))
