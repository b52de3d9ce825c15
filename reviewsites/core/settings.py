"""reviewsites settings injection and verification

Points a site's checkout at its own database and file storage by
appending a generated block to the settings file, then reads the live
configuration back through drush to confirm it took effect.
"""
import os
import re
import shutil
from dataclasses import asdict, dataclass

from jinja2 import Environment, PackageLoader, StrictUndefined

from reviewsites.core.drush import RSDrush
from reviewsites.core.exc import SiteConfigError, VerificationError
from reviewsites.core.fileutils import RSFileUtils
from reviewsites.core.logging import Log
from reviewsites.core.shellexec import CommandExecutionError
from reviewsites.core.variables import RSVar

REWRITE_BASE_RE = re.compile(r'^([ \t]*)#[ \t]*(RewriteBase /)[ \t]*$',
                             re.MULTILINE)


def php_string(value):
    """Escape a value for a single-quoted PHP string literal"""
    return str(value).replace('\\', '\\\\').replace("'", "\\'")


def host_pattern(domain):
    return '^' + re.escape(domain) + '$'


_env = Environment(loader=PackageLoader('reviewsites.cli', 'templates'),
                   undefined=StrictUndefined,
                   keep_trailing_newline=True,
                   autoescape=False)
_env.filters['php'] = php_string
_env.filters['host_pattern'] = host_pattern


@dataclass(frozen=True)
class SettingsBlock:
    """Placeholders of the generated settings block"""
    begin_marker: str
    end_marker: str
    database: str
    username: str
    password: str
    host: str
    port: int
    public_path: str
    private_path: str
    domains: tuple

    template = 'settings.php.jinja2'

    def render(self):
        return _env.get_template(self.template).render(**asdict(self))


class SettingsInjector:
    """Config injector and verifier for one site checkout"""

    def __init__(self, app, config, drush=None):
        self.app = app
        self.config = config
        self.drush = drush or RSDrush(app, config.drush)

    def settings_path(self, site):
        return os.path.join(site.source_root, self.config.settings_file)

    def htaccess_path(self, site):
        return os.path.join(site.source_root, self.config.htaccess_file)

    def block(self, site):
        return SettingsBlock(
            begin_marker=RSVar.rs_settings_begin,
            end_marker=RSVar.rs_settings_end,
            database=site.database_name,
            username=self.config.db_user,
            password=self.config.db_password,
            host=self.config.db_host,
            port=self.config.db_port,
            public_path=self.config.public_files,
            private_path=site.private_files,
            domains=tuple(site.domains))

    def enable_rewrite_base(self, site):
        """Uncomment ``# RewriteBase /``, return True if the file changed"""
        path = self.htaccess_path(site)
        content = RSFileUtils.read(self.app, path)
        if content is None:
            Log.debug(self.app, "No {0}, skipping RewriteBase"
                      .format(path))
            return False
        updated = REWRITE_BASE_RE.sub(r'\1\2', content, count=1)
        if updated == content:
            return False
        try:
            RSFileUtils.write(self.app, path, updated)
        except OSError as e:
            raise SiteConfigError("Unable to update {0}: {1}"
                                  .format(path, e))
        Log.debug(self.app, "Enabled RewriteBase in {0}".format(path))
        return True

    def inject(self, site):
        """Append the generated block to the settings file, once"""
        self.enable_rewrite_base(site)
        path = self.settings_path(site)
        content = RSFileUtils.read(self.app, path)
        if content is None:
            default = os.path.join(os.path.dirname(path),
                                   'default.settings.php')
            if not os.path.isfile(default):
                raise SiteConfigError("Settings file {0} not found"
                                      .format(path))
            shutil.copyfile(default, path)
            content = RSFileUtils.read(self.app, path)
        if RSVar.rs_settings_begin in content:
            Log.debug(self.app, "Settings block already present in {0}"
                      .format(path))
            return False
        if content and not content.endswith('\n'):
            content += '\n'
        try:
            RSFileUtils.write(self.app, path,
                              content + '\n' + self.block(site).render())
        except OSError as e:
            raise SiteConfigError("Unable to write {0}: {1}"
                                  .format(path, e))
        Log.debug(self.app, "Injected settings block into {0}".format(path))
        return True

    def verify(self, site):
        """Fail unless the live database is the one the site was given"""
        try:
            status = self.drush.status(site.source_root)
        except (CommandExecutionError, ValueError) as e:
            raise VerificationError("Unable to read live configuration of "
                                    "{0}: {1}".format(site.site_id, e))
        live = status.get('db-name')
        if live != site.database_name:
            raise VerificationError(
                "Site {0} uses database '{1}' on '{2}', expected '{3}'"
                .format(site.site_id, live, status.get('db-hostname'),
                        site.database_name))
        Log.debug(self.app, "Verified {0} uses database {1}"
                  .format(site.site_id, live))
