"""reviewsites hook dispatcher

Hooks are executables in ``hooks_dir`` named after a lifecycle
checkpoint. They run as separate processes and only see the site through
their environment, so they cannot touch the tool's in-memory state.
"""
import os

from reviewsites.core.exc import HookError
from reviewsites.core.logging import Log
from reviewsites.core.shellexec import CommandExecutionError, RSShellExec


def hook_environment(hook_name, site):
    return {
        'REVIEWSITES_HOOK': hook_name,
        'REVIEWSITES_SITE_ID': site.site_id,
        'REVIEWSITES_BRANCH': site.branch_name,
        'REVIEWSITES_SITE_DIR': site.site_dir,
        'REVIEWSITES_SOURCE_ROOT': site.source_root,
        'REVIEWSITES_DATABASE': site.database_name,
        'REVIEWSITES_DOMAINS': ' '.join(site.domains),
    }


class HookDispatcher:

    def __init__(self, app, config):
        self.app = app
        self.hooks_dir = config.hooks_dir

    def path(self, hook_name):
        if (not hook_name or hook_name in ('.', '..')
                or os.path.basename(hook_name) != hook_name):
            raise HookError("Invalid hook name '{0}'".format(hook_name))
        return os.path.join(self.hooks_dir, hook_name)

    def trigger(self, hook_name, site):
        """Run the hook if present, return True when it ran"""
        path = self.path(hook_name)
        if not os.path.isfile(path):
            Log.debug(self.app, "No {0} hook".format(hook_name))
            return False
        if not os.access(path, os.X_OK):
            Log.warn(self.app, "Hook {0} is not executable, skipping"
                     .format(path))
            return False
        cwd = site.source_root if os.path.isdir(site.source_root) else None
        Log.info(self.app, "Running {0} hook".format(hook_name))
        try:
            proc = RSShellExec.cmd_run(
                self.app, [path], cwd=cwd,
                env=hook_environment(hook_name, site))
        except CommandExecutionError as e:
            raise HookError("Hook {0} failed: {1}".format(hook_name, e))
        if proc.stdout.strip():
            Log.info(self.app, proc.stdout.rstrip())
        return True
