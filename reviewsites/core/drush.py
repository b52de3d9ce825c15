"""reviewsites drush module"""
import json

from reviewsites.core.logging import Log
from reviewsites.core.shellexec import RSShellExec


class RSDrush():
    """CMS command line tool, used to read back live settings"""

    def __init__(self, app, drush):
        self.app = app
        self.drush = drush

    def status(self, root, fields=('db-hostname', 'db-name')):
        """Return drush status fields for the site at root as a dict"""
        out = RSShellExec.cmd_exec_stdout(
            self.app, [self.drush, '--root={0}'.format(root), 'status',
                       '--fields={0}'.format(','.join(fields)),
                       '--format=json'], cwd=root)
        data = json.loads(out or '{}')
        if not isinstance(data, dict):
            raise ValueError("unexpected drush status output: {0!r}"
                             .format(out))
        Log.debug(self.app, "drush status: {0}".format(data))
        return data
