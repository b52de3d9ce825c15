"""reviewsites resource provisioner

Builds a new site: directory and metadata, source checkout, database
snapshot and import, file storage copy with the public files linked into
the checkout. Steps are not rolled back; a failure leaves whatever the
earlier steps created for the operator to remove with ``delete``.
"""
import os

from reviewsites.core.exc import (FilesystemCollisionError, SiteExistsError,
                                  SiteFilesystemError, SnapshotError,
                                  SourceCheckoutError)
from reviewsites.core.fileutils import RSFileUtils
from reviewsites.core.git import RSGit
from reviewsites.core.logging import Log
from reviewsites.core.mysql import RSMysql
from reviewsites.core.registry import Snapshot, utcnow
from reviewsites.core.shellexec import CommandExecutionError


class SiteProvisioner:

    def __init__(self, app, config, registry, git=None, mysql=None):
        self.app = app
        self.config = config
        self.registry = registry
        self.git = git or RSGit(app)
        self.mysql = mysql or RSMysql(app, config)

    def provision(self, site_id, branch_name):
        if not self.registry.is_vacant(site_id):
            raise SiteExistsError("Site {0} already exists in {1}"
                                  .format(site_id,
                                          self.registry.site_dir(site_id)))

        Log.info(self.app, "Creating site directory...")
        try:
            site = self.registry.record(site_id, branch_name)
        except OSError as e:
            raise SiteFilesystemError("Unable to create {0}: {1}".format(
                self.registry.site_dir(site_id), e))

        Log.info(self.app, "Cloning branch {0}...".format(branch_name))
        self.checkout(site)

        Log.info(self.app, "Taking snapshot of {0}..."
                 .format(self.config.base_db_name))
        snapshot = self.snapshot(site)
        self.registry.record_snapshot(site_id, snapshot)

        Log.info(self.app, "Creating database {0}..."
                 .format(site.database_name))
        self.mysql.create_database(site.database_name)

        Log.info(self.app, "Importing snapshot...")
        self.mysql.import_dump(site.database_name, site.dump_path)

        Log.info(self.app, "Copying files...")
        self.copy_files(site)

        return self.registry.load(site_id)

    def checkout(self, site):
        remote = self.config.git_remote
        try:
            if not self.git.remote_branch_exists(remote, site.branch_name):
                raise SourceCheckoutError(
                    "Branch {0} does not exist on {1}"
                    .format(site.branch_name, remote))
            self.git.clone(remote, site.branch_name, site.source_root)
        except CommandExecutionError as e:
            raise SourceCheckoutError("Unable to clone {0}: {1}"
                                      .format(site.branch_name, e))

    def snapshot(self, site):
        """Dump the base database and describe where it came from"""
        base_root = self.config.base_root
        try:
            branch = self.git.current_branch(base_root)
            commit = self.git.current_commit(base_root)
        except CommandExecutionError as e:
            raise SnapshotError("Unable to read base revision in {0}: {1}"
                                .format(base_root, e))
        self.mysql.export(self.config.base_db_name, site.dump_path)
        return Snapshot(branch=branch, commit=commit, created_at=utcnow())

    def public_link(self, site):
        """Path in the checkout where the web server expects public files"""
        return os.path.join(site.source_root, self.config.public_files)

    def copy_files(self, site):
        """Copy base file storage, then link public files into the docroot"""
        pairs = [
            (os.path.join(self.config.base_root, self.config.public_files),
             site.public_files),
            (self.config.private_files, site.private_files),
        ]
        for _, dest in pairs:
            if os.path.lexists(dest):
                raise FilesystemCollisionError("{0} already exists"
                                               .format(dest))
        link = self.public_link(site)
        if (os.path.lexists(link) and not os.path.islink(link)
                and not RSFileUtils.isempty(self.app, link)):
            raise FilesystemCollisionError(
                "{0} already exists in the checkout".format(link))
        try:
            for src, dest in pairs:
                if src and os.path.isdir(src):
                    RSFileUtils.copyfiles(self.app, src, dest)
                else:
                    Log.warn(self.app, "No files at '{0}', creating empty {1}"
                             .format(src, dest))
                    RSFileUtils.mkdir(self.app, dest)
            RSFileUtils.remove(self.app, link)
            RSFileUtils.mkdir(self.app, os.path.dirname(link))
            RSFileUtils.create_symlink(self.app, [
                os.path.relpath(site.public_files, os.path.dirname(link)),
                link])
        except OSError as e:
            raise SiteFilesystemError("Unable to copy files for {0}: {1}"
                                      .format(site.site_id, e))
