"""reviewsites site registry

One directory per site under ``sites_root``. A site exists if and only
if its directory exists; the metadata files inside it are written by the
provisioner and never changed afterwards.
"""
import json
import os
from dataclasses import dataclass, field
from datetime import datetime, timezone

from reviewsites.core.exc import SiteNotFoundError
from reviewsites.core.fileutils import RSFileUtils
from reviewsites.core.logging import Log
from reviewsites.core.variables import RSVar


@dataclass(frozen=True)
class Snapshot:
    """Provenance of the base database dump taken for a site"""
    branch: str
    commit: str
    created_at: str

    def to_json(self):
        return json.dumps({'branch': self.branch,
                           'commit': self.commit,
                           'created_at': self.created_at}, indent=2) + '\n'

    @classmethod
    def from_json(cls, text):
        data = json.loads(text)
        return cls(branch=data.get('branch', ''),
                   commit=data.get('commit', ''),
                   created_at=data.get('created_at', ''))


@dataclass(frozen=True)
class Site:
    site_id: str
    branch_name: str
    site_dir: str
    database_name: str
    domains: tuple
    created_at: str = ''
    snapshot: Snapshot = field(default=None)

    @property
    def source_root(self):
        return os.path.join(self.site_dir, RSVar.rs_source_dir)

    @property
    def dump_path(self):
        return os.path.join(self.site_dir, RSVar.rs_dump_file)

    @property
    def public_files(self):
        return os.path.join(self.site_dir, RSVar.rs_files_dir,
                            RSVar.rs_public_dir)

    @property
    def private_files(self):
        return os.path.join(self.site_dir, RSVar.rs_files_dir,
                            RSVar.rs_private_dir)

    def as_dict(self):
        return {'site_id': self.site_id,
                'branch_name': self.branch_name,
                'database': self.database_name,
                'domains': list(self.domains)}


def utcnow():
    return datetime.now(timezone.utc).isoformat(timespec='seconds')


class SiteRegistry:
    """Directory-per-site store rooted at config.sites_root"""

    def __init__(self, app, config):
        self.app = app
        self.config = config
        self.root = config.sites_root

    def site_dir(self, site_id):
        return os.path.join(self.root, site_id)

    def exists(self, site_id):
        return bool(site_id) and os.path.isdir(self.site_dir(site_id))

    def is_vacant(self, site_id):
        """True when the site directory is missing or empty"""
        return RSFileUtils.isempty(self.app, self.site_dir(site_id))

    def list(self):
        """Sorted identifiers of every site in the registry"""
        if not os.path.isdir(self.root):
            return []
        return sorted(entry.name for entry in os.scandir(self.root)
                      if entry.is_dir(follow_symlinks=False))

    def build(self, site_id, branch_name, created_at='', snapshot=None):
        """Site value with its derived fields computed from config"""
        return Site(site_id=site_id,
                    branch_name=branch_name,
                    site_dir=self.site_dir(site_id),
                    database_name=self.config.database_name(site_id),
                    domains=tuple(self.config.domains(site_id)),
                    created_at=created_at,
                    snapshot=snapshot)

    def load(self, site_id, branch_name=None):
        """Load a site, preferring the branch name stored at creation"""
        if not self.exists(site_id):
            raise SiteNotFoundError("Site {0} does not exist".format(site_id))
        site_dir = self.site_dir(site_id)
        stored = RSFileUtils.read(
            self.app, os.path.join(site_dir, RSVar.rs_branch_file))
        if stored is not None and stored.strip():
            branch_name = stored.strip()
        created_at = RSFileUtils.read(
            self.app, os.path.join(site_dir, RSVar.rs_created_file), '')
        snapshot = None
        snapshot_text = RSFileUtils.read(
            self.app, os.path.join(site_dir, RSVar.rs_snapshot_file))
        if snapshot_text:
            try:
                snapshot = Snapshot.from_json(snapshot_text)
            except ValueError as e:
                Log.warn(self.app, "Ignoring unreadable snapshot record for "
                         "{0}: {1}".format(site_id, e))
        return self.build(site_id, branch_name or site_id,
                          created_at=created_at.strip(), snapshot=snapshot)

    def sites(self):
        return [self.load(site_id) for site_id in self.list()]

    def record(self, site_id, branch_name):
        """Create the site directory and persist branch and creation time"""
        site_dir = self.site_dir(site_id)
        RSFileUtils.mkdir(self.app, site_dir)
        created_at = utcnow()
        RSFileUtils.write(self.app,
                          os.path.join(site_dir, RSVar.rs_branch_file),
                          branch_name + '\n')
        RSFileUtils.write(self.app,
                          os.path.join(site_dir, RSVar.rs_created_file),
                          created_at + '\n')
        return self.build(site_id, branch_name, created_at=created_at)

    def record_snapshot(self, site_id, snapshot):
        RSFileUtils.write(self.app,
                          os.path.join(self.site_dir(site_id),
                                       RSVar.rs_snapshot_file),
                          snapshot.to_json())
