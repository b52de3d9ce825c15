"""reviewsites site commands"""
import json

from cement import Controller, ex

from reviewsites.core.lifecycle import SiteLifecycle
from reviewsites.core.logging import Log

SITE_ARG = (['site_name'],
            dict(help='Branch name or site id', action='store'))
JSON_ARG = (['--json'],
            dict(help='Print JSON instead of text', action='store_true'))


class RSSiteController(Controller):
    """Review site lifecycle commands"""

    class Meta:
        label = 'site'
        stacked_on = 'base'
        stacked_type = 'embedded'

    def _lifecycle(self):
        return SiteLifecycle(self, self.app.review_config)

    @ex(help="List review sites", arguments=[JSON_ARG])
    def list(self):
        sites = self._lifecycle().list()
        if self.app.pargs.json:
            print(json.dumps([site.as_dict() for site in sites], indent=2))
            return
        if not sites:
            Log.info(self, "No review sites found")
            return
        Log.info(self, f"{'Site':<40} {'Branch':<40} {'Database':<40}")
        Log.info(self, "-" * 120)
        for site in sites:
            Log.info(self, f"{site.site_id:<40} {site.branch_name:<40} "
                           f"{site.database_name:<40}")
        Log.info(self, "-" * 120)
        Log.info(self, f"Total: {len(sites)} sites")

    @ex(help="Create a review site for a branch",
        arguments=[(['site_name'],
                    dict(help='Branch name', action='store'))])
    def create(self):
        self._lifecycle().create(self.app.pargs.site_name)

    @ex(help="Update a review site from its upstream branch",
        arguments=[
            SITE_ARG,
            (['--create'],
                dict(help='Create the site if it does not exist',
                     action='store_true')),
        ])
    def pull(self):
        pargs = self.app.pargs
        self._lifecycle().pull(pargs.site_name, create=pargs.create)

    @ex(help="Delete a review site, its database and files",
        arguments=[
            SITE_ARG,
            (['-f', '--force'],
                dict(help='Delete without confirmation',
                     action='store_true')),
        ])
    def delete(self):
        pargs = self.app.pargs
        self._lifecycle().delete(pargs.site_name, force=pargs.force)

    @ex(help="Show review site details", arguments=[SITE_ARG, JSON_ARG])
    def info(self):
        site = self._lifecycle().info(self.app.pargs.site_name)
        if self.app.pargs.json:
            print(json.dumps(site.as_dict(), indent=2))
            return
        Log.info(self, f"Site:       {site.site_id}")
        Log.info(self, f"Branch:     {site.branch_name}")
        Log.info(self, f"Database:   {site.database_name}")
        Log.info(self, f"Directory:  {site.site_dir}")
        Log.info(self, f"Created:    {site.created_at or 'unknown'}")
        for domain in site.domains:
            Log.info(self, f"Domain:     {domain}")
        if site.snapshot:
            Log.info(self, f"Snapshot:   {site.snapshot.branch} "
                           f"@ {site.snapshot.commit} "
                           f"({site.snapshot.created_at})")

    @ex(help="Rebuild the webroot links for every site")
    def rehash(self):
        count = self._lifecycle().rehash()
        Log.info(self, f"Published {count} webroot links")

    @ex(label='setup-mysql-user',
        help="Print SQL that creates the database user, "
             "pipe it to the mysql client")
    def setup_mysql_user(self):
        for statement in self._lifecycle().mysql_user_statements():
            print(statement)

    @ex(label='trigger-hook',
        help="Run a hook for a review site",
        arguments=[
            SITE_ARG,
            (['hook_name'], dict(help='Hook to run', action='store')),
        ])
    def trigger_hook(self):
        pargs = self.app.pargs
        self._lifecycle().trigger_hook(pargs.site_name, pargs.hook_name)
