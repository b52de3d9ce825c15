"""reviewsites lifecycle orchestrator

A site moves Absent -> Provisioning -> Ready -> Deleted, with pulls
looping Ready -> Updating -> Ready. Every step runs once, in order, and
the first failure ends the operation.
"""
from reviewsites.core.exc import (ReviewSitesError, SiteExistsError,
                                  SiteFilesystemError, SiteNotFoundError,
                                  UserAbortedError)
from reviewsites.core.fileutils import RSFileUtils
from reviewsites.core.hooks import HookDispatcher
from reviewsites.core.identity import resolve
from reviewsites.core.logging import Log
from reviewsites.core.mysql import RSMysql
from reviewsites.core.provision import SiteProvisioner
from reviewsites.core.registry import SiteRegistry
from reviewsites.core.settings import SettingsInjector
from reviewsites.core.update import UpdateEngine
from reviewsites.core.variables import RSVar
from reviewsites.core.webroot import WebrootPublisher


class SiteLifecycle:

    def __init__(self, app, config, registry=None, provisioner=None,
                 updater=None, injector=None, publisher=None, hooks=None,
                 mysql=None):
        self.app = app
        self.config = config
        self.registry = registry or SiteRegistry(app, config)
        self.mysql = mysql or RSMysql(app, config)
        self.provisioner = provisioner or SiteProvisioner(
            app, config, self.registry, mysql=self.mysql)
        self.updater = updater or UpdateEngine(app)
        self.injector = injector or SettingsInjector(app, config)
        self.publisher = publisher or WebrootPublisher(app, config)
        self.hooks = hooks or HookDispatcher(app, config)

    def site_id(self, name):
        if not name or not name.strip():
            raise ReviewSitesError("A branch name or site id is required")
        return resolve(name.strip())

    def load(self, name):
        return self.registry.load(self.site_id(name), name.strip())

    def create(self, branch_name):
        site_id = self.site_id(branch_name)
        branch_name = branch_name.strip()
        if not self.registry.is_vacant(site_id):
            raise SiteExistsError(
                "Site {0} already exists, run 'reviewsites delete {0}' "
                "first to recreate it".format(site_id))
        pending = self.registry.build(site_id, branch_name)
        if len(pending.database_name) > RSVar.rs_db_name_max:
            raise ReviewSitesError(
                "Database name {0} is longer than {1} characters, use a "
                "shorter branch name".format(pending.database_name,
                                             RSVar.rs_db_name_max))
        Log.info(self.app, "Creating site {0} from branch {1}"
                 .format(site_id, branch_name))
        self.hooks.trigger('pre-create', pending)
        self.hooks.trigger('pre-update', pending)

        site = self.provisioner.provision(site_id, branch_name)

        Log.info(self.app, "Configuring site...")
        self.injector.inject(site)
        self.injector.verify(site)

        Log.info(self.app, "Publishing webroot links...")
        self.rehash()

        self.hooks.trigger('post-update', site)
        self.hooks.trigger('post-create', site)
        Log.valide(self.app, "Site {0} created".format(site_id))
        for domain in site.domains:
            Log.info(self.app, "   http://{0}".format(domain))
        return site

    def pull(self, name, create=False):
        """Update a site from upstream, optionally creating it first"""
        site_id = self.site_id(name)
        if create and self.registry.is_vacant(site_id):
            return self.create(name)
        if not self.registry.exists(site_id):
            raise SiteNotFoundError("Site {0} does not exist"
                                    .format(site_id))
        site = self.registry.load(site_id, name.strip())

        Log.info(self.app, "Checking {0} for updates...".format(site_id))
        commits = self.updater.check(site)
        if not commits:
            Log.info(self.app, "Site {0} is already up to date"
                     .format(site_id))
            return site
        Log.info(self.app, "{0} new commit(s) on {1}:"
                 .format(len(commits), site.branch_name))
        for summary in commits:
            Log.info(self.app, "   {0}".format(summary))

        self.hooks.trigger('pre-pull', site)
        self.hooks.trigger('pre-update', site)

        Log.info(self.app, "Applying updates...")
        self.updater.apply(site)
        self.injector.inject(site)
        self.injector.verify(site)

        self.hooks.trigger('post-update', site)
        self.hooks.trigger('post-pull', site)
        Log.valide(self.app, "Site {0} updated".format(site_id))
        return site

    def delete(self, name, force=False):
        site = self.load(name)
        if not force:
            Log.warn(self.app, "This will delete site {0}, its database {1} "
                     "and all of its files".format(site.site_id,
                                                   site.database_name))
            try:
                confirm = input("Continue? [y/N]: ").strip().lower()
            except (EOFError, KeyboardInterrupt):
                confirm = ''
            if confirm != 'y':
                raise UserAbortedError("Aborted, site {0} was not deleted"
                                       .format(site.site_id))
        self.hooks.trigger('pre-delete', site)

        Log.info(self.app, "Dropping database {0}..."
                 .format(site.database_name))
        self.mysql.drop_database(site.database_name)
        Log.info(self.app, "Removing {0}...".format(site.site_dir))
        try:
            RSFileUtils.remove(self.app, site.site_dir)
        except OSError as e:
            raise SiteFilesystemError("Unable to remove {0}: {1}"
                                      .format(site.site_dir, e))
        self.rehash()

        self.hooks.trigger('post-delete', site)
        Log.valide(self.app, "Site {0} deleted".format(site.site_id))
        return site

    def info(self, name):
        return self.load(name)

    def list(self):
        return self.registry.sites()

    def rehash(self):
        return self.publisher.rebuild(self.registry.sites(),
                                      self.config.base_domains)

    def trigger_hook(self, name, hook_name):
        site = self.load(name)
        if not self.hooks.trigger(hook_name, site):
            Log.info(self.app, "No executable {0} hook in {1}"
                     .format(hook_name, self.config.hooks_dir))
        return site

    def mysql_user_statements(self):
        return self.mysql.user_statements()
