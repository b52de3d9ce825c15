import os
import re
from types import SimpleNamespace

import pytest

from reviewsites.cli.main import ReviewSitesTestApp
from reviewsites.cli.plugins import site as site_plugin
from reviewsites.core.config import ReviewConfig
from reviewsites.core.exc import DatabaseCreateError
from reviewsites.core.lifecycle import SiteLifecycle
from reviewsites.core.provision import SiteProvisioner
from reviewsites.core.registry import SiteRegistry
from reviewsites.core.settings import SettingsInjector
from reviewsites.core.shellexec import CommandExecutionError
from reviewsites.core.update import UpdateEngine

HTACCESS = """<IfModule mod_rewrite.c>
  RewriteEngine on
  # RewriteBase /drupal
  #
  # If your site is running in a VirtualDocumentRoot at http://example.com/,
  # uncomment the following line:
  # RewriteBase /
</IfModule>
"""


class FakeGit:
    """Records git calls and fakes a checkout on clone"""

    def __init__(self, branches=('main',)):
        self.branches = set(branches)
        self.pending = {}
        self.calls = []
        self.fail = set()

    def _call(self, name, *args):
        self.calls.append((name,) + args)
        if name in self.fail:
            raise CommandExecutionError(['git', name], 128, 'fatal: boom')

    def remote_branch_exists(self, remote, branch):
        self._call('ls-remote', remote, branch)
        return branch in self.branches

    def clone(self, remote, branch, dest):
        self._call('clone', remote, branch, dest)
        os.makedirs(os.path.join(dest, 'sites', 'default'))
        with open(os.path.join(dest, '.htaccess'), 'w') as f:
            f.write(HTACCESS)
        with open(os.path.join(dest, 'sites', 'default',
                               'default.settings.php'), 'w') as f:
            f.write("<?php\n\n$settings['hash_salt'] = '';\n")

    def fetch(self, repo, branch):
        self._call('fetch', repo, branch)

    def current_branch(self, repo):
        self._call('rev-parse-branch', repo)
        return 'main'

    def current_commit(self, repo, ref='HEAD'):
        self._call('rev-parse', repo)
        return '0123456789abcdef0123456789abcdef01234567'

    def pending_commits(self, repo, branch):
        self._call('log', repo, branch)
        return list(self.pending.get(branch, []))

    def reset_hard(self, repo):
        self._call('reset', repo)

    def fast_forward(self, repo, branch):
        self._call('merge', repo, branch)
        self.pending.pop(branch, None)


class FakeMysql:
    """In-memory database server"""

    def __init__(self):
        self.databases = set()
        self.imported = {}
        self.calls = []

    def create_database(self, name):
        self.calls.append(('create', name))
        if name in self.databases:
            raise DatabaseCreateError("Database {0} already exists"
                                      .format(name))
        self.databases.add(name)

    def drop_database(self, name):
        self.calls.append(('drop', name))
        self.databases.discard(name)

    def export(self, database, dump_path):
        self.calls.append(('export', database))
        with open(dump_path, 'wb') as f:
            f.write(b"CREATE TABLE node (nid int);\n")

    def import_dump(self, database, dump_path):
        self.calls.append(('import', database))
        with open(dump_path, 'rb') as f:
            self.imported[database] = f.read()

    def user_statements(self):
        return ["FLUSH PRIVILEGES;"]


class FakeDrush:
    """Reads the database name back out of settings.php"""

    def __init__(self, settings_file='sites/default/settings.php'):
        self.settings_file = settings_file
        self.override = None

    def status(self, root, fields=('db-hostname', 'db-name')):
        if self.override is not None:
            return dict(self.override)
        path = os.path.join(root, self.settings_file)
        with open(path) as f:
            found = re.findall(r"'database' => '([^']*)'", f.read())
        return {'db-hostname': 'localhost',
                'db-name': found[-1] if found else None}


@pytest.fixture
def settings(tmp_path):
    """[reviewsites] configuration values pointing into tmp_path"""
    base_root = tmp_path / 'base'
    files = base_root / 'sites' / 'default' / 'files'
    files.mkdir(parents=True)
    (files / 'logo.png').write_bytes(b'\x89PNG')
    private = tmp_path / 'private'
    private.mkdir()
    (private / 'secret.txt').write_text('s3cret')
    return {
        'sites_root': str(tmp_path / 'sites'),
        'webroot': str(tmp_path / 'webroot'),
        'hooks_dir': str(tmp_path / 'hooks'),
        'base_root': str(base_root),
        'base_domains': 'review.example.test',
        'git_remote': 'git@git.example.test:web/drupal.git',
        'db_prefix': 'review_',
        'db_host': 'localhost',
        'db_port': 3306,
        'db_user': 'reviewsites',
        'db_password': 'pa55',
        'base_db_name': 'drupal',
        'drush': 'drush',
        'public_files': 'sites/default/files',
        'private_files': str(private),
        'settings_file': 'sites/default/settings.php',
        'htaccess_file': '.htaccess',
    }


@pytest.fixture
def config(settings):
    values = dict(settings)
    values['base_domains'] = tuple(values['base_domains'].split(','))
    return ReviewConfig(**values)


@pytest.fixture
def ctx():
    """Controller stand-in: anything with an ``.app`` works for Log"""
    with ReviewSitesTestApp() as app:
        yield SimpleNamespace(app=app)


@pytest.fixture
def fake_git():
    return FakeGit(branches=('main', 'feature/login-fix', 'site-x'))


@pytest.fixture
def fake_mysql():
    return FakeMysql()


@pytest.fixture
def fake_drush():
    return FakeDrush()


def make_lifecycle(app, config, git, mysql, drush):
    registry = SiteRegistry(app, config)
    return SiteLifecycle(
        app, config,
        registry=registry,
        provisioner=SiteProvisioner(app, config, registry,
                                    git=git, mysql=mysql),
        updater=UpdateEngine(app, git=git),
        injector=SettingsInjector(app, config, drush=drush),
        mysql=mysql)


@pytest.fixture
def lifecycle(ctx, config, fake_git, fake_mysql, fake_drush):
    return make_lifecycle(ctx, config, fake_git, fake_mysql, fake_drush)


@pytest.fixture
def run_cli(monkeypatch, settings, fake_git, fake_mysql, fake_drush):
    """Run a reviewsites command line against fakes"""
    def factory(app, config):
        return make_lifecycle(app, config, fake_git, fake_mysql, fake_drush)

    monkeypatch.setattr(site_plugin, 'SiteLifecycle', factory)

    def run(*argv):
        with ReviewSitesTestApp(argv=list(argv)) as app:
            for key, value in settings.items():
                app.config.set('reviewsites', key, value)
            app.run()
            return app

    return run
