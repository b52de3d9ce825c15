"""Site identity derivation.

Branch names become site identifiers, database names and domain names.
All functions here are pure and total.
"""
import re

_SITE_ID_RE = re.compile(r'[^a-z0-9_]', re.IGNORECASE | re.ASCII)
_DB_IDENT_RE = re.compile(r'[^A-Za-z0-9_]', re.ASCII)


def resolve(branch_name):
    """Derive the site identifier for a branch name.

    Every character other than ASCII letters, digits and underscore is
    replaced by a hyphen, so ``feature/login-fix`` becomes
    ``feature-login-fix``. Resolving an identifier again returns it
    unchanged.
    """
    return _SITE_ID_RE.sub('-', branch_name)


def database_name(prefix, site_id):
    """Database name for a site, folded to ``[A-Za-z0-9_]``."""
    return _DB_IDENT_RE.sub('_', prefix + site_id)


def domains(site_id, base_domains):
    return ['{0}.{1}'.format(site_id, base) for base in base_domains]
