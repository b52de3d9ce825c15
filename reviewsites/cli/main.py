"""reviewsites main application entry point."""
import sys

from cement import App, TestApp, init_defaults
from cement.core.exc import CaughtSignal, FrameworkError

from reviewsites.cli.controllers.base import RSBaseController
from reviewsites.cli.plugins.site import RSSiteController
from reviewsites.core.config import ReviewConfig
from reviewsites.core.exc import ReviewSitesError
from reviewsites.core.variables import RSVar

# Application defaults. Should update config/reviewsites.conf to reflect
# any changes, or additions here.
defaults = init_defaults('reviewsites', 'log.logging')
defaults['reviewsites']['sites_root'] = '/srv/review/sites'
defaults['reviewsites']['webroot'] = '/srv/review/webroot'
defaults['reviewsites']['hooks_dir'] = '/etc/reviewsites/hooks'
defaults['reviewsites']['base_root'] = '/var/www/drupal'
defaults['reviewsites']['base_domains'] = 'review.example.test'
defaults['reviewsites']['git_remote'] = ''
defaults['reviewsites']['db_prefix'] = 'review_'
defaults['reviewsites']['db_host'] = 'localhost'
defaults['reviewsites']['db_port'] = 3306
defaults['reviewsites']['db_user'] = 'reviewsites'
defaults['reviewsites']['db_password'] = ''
defaults['reviewsites']['base_db_name'] = 'drupal'
defaults['reviewsites']['drush'] = '/usr/local/bin/drush'
defaults['reviewsites']['public_files'] = 'sites/default/files'
defaults['reviewsites']['private_files'] = ''
defaults['reviewsites']['settings_file'] = 'sites/default/settings.php'
defaults['reviewsites']['htaccess_file'] = '.htaccess'
defaults['log.logging']['to_console'] = False
defaults['log.logging']['file'] = None
defaults['log.logging']['level'] = 'INFO'


def load_review_config(app):
    """Build the immutable configuration once, before any command runs"""
    app.extend('review_config', ReviewConfig.from_app(app))


class ReviewSitesApp(App):
    class Meta:
        label = 'reviewsites'
        config_defaults = defaults
        config_files = list(RSVar.rs_config_files)
        exit_on_close = True
        hooks = [
            ('pre_run', load_review_config),
        ]
        handlers = [
            RSBaseController,
            RSSiteController,
        ]


class ReviewSitesTestApp(TestApp, ReviewSitesApp):
    """A test app that is better suited for testing."""
    class Meta:
        label = 'reviewsites'
        config_files = []


def main():
    with ReviewSitesApp() as app:
        try:
            app.run()
        except ReviewSitesError as e:
            print(e, file=sys.stderr)
            app.exit_code = 1
            if app.debug is True:
                import traceback
                traceback.print_exc()
        except (FrameworkError, OSError) as e:
            print(e, file=sys.stderr)
            app.exit_code = 1
        except CaughtSignal as e:
            print('\n%s' % e, file=sys.stderr)
            app.exit_code = 1


if __name__ == '__main__':
    main()
