"""reviewsites configuration object"""
import os
from dataclasses import dataclass

from reviewsites.core.exc import ReviewConfigError
from reviewsites.core.identity import database_name, domains


def _as_list(value):
    if isinstance(value, (list, tuple)):
        return tuple(str(v).strip() for v in value if str(v).strip())
    return tuple(v.strip() for v in str(value or '').split(',') if v.strip())


@dataclass(frozen=True)
class ReviewConfig:
    """Immutable tool configuration, built once per invocation."""

    sites_root: str
    webroot: str
    hooks_dir: str
    base_root: str
    base_domains: tuple
    git_remote: str
    db_prefix: str
    db_host: str
    db_port: int
    db_user: str
    db_password: str
    base_db_name: str
    drush: str
    public_files: str = 'sites/default/files'
    private_files: str = ''
    settings_file: str = 'sites/default/settings.php'
    htaccess_file: str = '.htaccess'

    def __post_init__(self):
        if not os.path.isabs(self.sites_root):
            raise ReviewConfigError(
                "sites_root must be an absolute path, got '{0}'"
                .format(self.sites_root))
        if not self.base_domains:
            raise ReviewConfigError("base_domains must list at least one "
                                    "domain")

    @classmethod
    def from_app(cls, app, section='reviewsites'):
        """Read the [reviewsites] section of the cement configuration"""
        def get(key):
            return app.config.get(section, key)

        try:
            port = int(get('db_port'))
        except (TypeError, ValueError):
            raise ReviewConfigError("db_port must be an integer, got '{0}'"
                                    .format(get('db_port')))
        return cls(
            sites_root=os.path.expanduser(get('sites_root')),
            webroot=os.path.expanduser(get('webroot')),
            hooks_dir=os.path.expanduser(get('hooks_dir')),
            base_root=os.path.expanduser(get('base_root')),
            base_domains=_as_list(get('base_domains')),
            git_remote=get('git_remote'),
            db_prefix=get('db_prefix'),
            db_host=get('db_host'),
            db_port=port,
            db_user=get('db_user'),
            db_password=get('db_password') or '',
            base_db_name=get('base_db_name'),
            drush=get('drush'),
            public_files=get('public_files'),
            private_files=os.path.expanduser(get('private_files') or ''),
            settings_file=get('settings_file'),
            htaccess_file=get('htaccess_file'),
        )

    def database_name(self, site_id):
        return database_name(self.db_prefix, site_id)

    def domains(self, site_id):
        return domains(site_id, self.base_domains)
