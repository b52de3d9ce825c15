"""reviewsites webroot publisher

The webroot is a flat directory of symlinks named after each site domain
and pointing at the site's source root. The virtual hosting layer maps a
request host to ``<webroot>/<host>``.
"""
import os

from reviewsites.core.exc import PublishError
from reviewsites.core.fileutils import RSFileUtils
from reviewsites.core.identity import domains
from reviewsites.core.logging import Log


class WebrootPublisher:

    def __init__(self, app, config):
        self.app = app
        self.webroot = config.webroot

    def links(self, sites, base_domains):
        """Expected {link name: relative target} for the given sites"""
        expected = {}
        for site in sites:
            target = os.path.relpath(site.source_root, self.webroot)
            for domain in domains(site.site_id, base_domains):
                expected[domain] = target
        return expected

    def rebuild(self, sites, base_domains):
        """Replace every symlink in the webroot with the current site set"""
        try:
            RSFileUtils.mkdir(self.app, self.webroot)
            RSFileUtils.remove_symlinks(self.app, self.webroot)
            created = 0
            for name, target in sorted(self.links(sites,
                                                  base_domains).items()):
                path = os.path.join(self.webroot, name)
                if RSFileUtils.create_symlink(self.app, [target, path]):
                    created += 1
                else:
                    Log.warn(self.app, "{0} exists and is not a symlink, "
                             "leaving it alone".format(path))
        except OSError as e:
            raise PublishError("Unable to publish links in {0}: {1}"
                               .format(self.webroot, e))
        Log.debug(self.app, "Published {0} links in {1}"
                  .format(created, self.webroot))
        return created
