"""reviewsites base controller."""

from cement import Controller

from reviewsites.core.variables import RSVar

VERSION = RSVar.rs_version

BANNER = """
reviewsites v%s
Per-branch review sites for Drupal
""" % VERSION


class RSBaseController(Controller):
    class Meta:
        label = 'base'
        description = ("Create, update and remove review sites that pair a "
                       "branch checkout with a cloned database and files")
        arguments = [
            (['-v', '--version'], dict(action='version', version=BANNER)),
        ]

    def _default(self):
        self.app.args.print_help()
