"""reviewsites MySQL module"""
import os
import re

from sqlalchemy import create_engine, text
from sqlalchemy.engine import URL
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import NullPool

from reviewsites.core.exc import (DatabaseCreateError, DatabaseImportError,
                                  ReviewSitesError, SnapshotError)
from reviewsites.core.logging import Log
from reviewsites.core.shellexec import CommandExecutionError, RSShellExec
from reviewsites.core.variables import RSVar

_IDENT_RE = re.compile(r'^[A-Za-z0-9_]+$')
_DEFINER_RE = re.compile(
    rb"\s*DEFINER\s*=\s*(`[^`]*`|'[^']*'|[^\s@]+)"
    rb"@(`[^`]*`|'[^']*'|[^\s*]+)")


def strip_definer(line):
    """Remove DEFINER=user@host clauses from one line of a dump"""
    return _DEFINER_RE.sub(b'', line)


def quote_ident(name):
    if (not _IDENT_RE.match(name or '')
            or len(name) > RSVar.rs_db_name_max):
        raise ReviewSitesError("Invalid database name: '{0}'".format(name))
    return '`{0}`'.format(name)


class RSMysql():
    """Database engine capability: create, drop, dump and import"""

    def __init__(self, app, config):
        self.app = app
        self.config = config
        self._engine = None

    @property
    def engine(self):
        if self._engine is None:
            url = URL.create('mysql+pymysql',
                             username=self.config.db_user,
                             password=self.config.db_password or None,
                             host=self.config.db_host,
                             port=self.config.db_port)
            self._engine = create_engine(url, poolclass=NullPool)
        return self._engine

    def execute(self, statement, params=None):
        Log.debug(self.app, "Executing MySQL statement: {0}"
                  .format(statement))
        with self.engine.begin() as conn:
            conn.execute(text(statement), params or {})

    def query(self, statement, params=None):
        with self.engine.connect() as conn:
            return conn.execute(text(statement), params or {}).fetchall()

    def database_exists(self, name):
        rows = self.query("SELECT SCHEMA_NAME FROM "
                          "INFORMATION_SCHEMA.SCHEMATA "
                          "WHERE SCHEMA_NAME = :name", {'name': name})
        return bool(rows)

    def create_database(self, name):
        """Create an empty UTF-8 database, fail if it already exists"""
        ident = quote_ident(name)
        try:
            if self.database_exists(name):
                raise DatabaseCreateError(
                    "Database {0} already exists".format(name))
            self.execute("CREATE DATABASE {0} CHARACTER SET {1} "
                         "COLLATE {2}".format(ident, RSVar.rs_db_charset,
                                              RSVar.rs_db_collation))
        except SQLAlchemyError as e:
            raise DatabaseCreateError(
                "Unable to create database {0}: {1}".format(name, e))
        Log.debug(self.app, "Created database {0}".format(name))

    def drop_database(self, name):
        ident = quote_ident(name)
        try:
            self.execute("DROP DATABASE IF EXISTS {0}".format(ident))
        except SQLAlchemyError as e:
            raise ReviewSitesError(
                "Unable to drop database {0}: {1}".format(name, e))
        Log.debug(self.app, "Dropped database {0}".format(name))

    def _client_args(self, binary):
        return [binary,
                '--host={0}'.format(self.config.db_host),
                '--port={0}'.format(self.config.db_port),
                '--user={0}'.format(self.config.db_user)]

    def _client_env(self):
        # keeps the password out of the process list
        if self.config.db_password:
            return {'MYSQL_PWD': self.config.db_password}
        return None

    def export(self, database, dump_path):
        """Dump a database to dump_path with DEFINER clauses removed"""
        quote_ident(database)
        raw_path = dump_path + '.raw'
        command = self._client_args('mysqldump') + [
            '--single-transaction', '--routines', '--triggers',
            database]
        try:
            with open(raw_path, 'wb') as raw:
                RSShellExec.cmd_run(self.app, command,
                                    env=self._client_env(), stdout=raw)
            with open(raw_path, 'rb') as src, open(dump_path, 'wb') as dst:
                for line in src:
                    dst.write(strip_definer(line))
        except (CommandExecutionError, OSError) as e:
            raise SnapshotError(
                "Unable to export database {0}: {1}".format(database, e))
        finally:
            if os.path.exists(raw_path):
                os.unlink(raw_path)
        Log.debug(self.app, "Exported {0} to {1}".format(database, dump_path))

    def import_dump(self, database, dump_path):
        quote_ident(database)
        command = self._client_args('mysql') + [database]
        try:
            with open(dump_path, 'rb') as dump:
                RSShellExec.cmd_run(self.app, command,
                                    env=self._client_env(), stdin=dump)
        except (CommandExecutionError, OSError) as e:
            raise DatabaseImportError(
                "Unable to import {0} into {1}: {2}"
                .format(dump_path, database, e))
        Log.debug(self.app, "Imported {0} into {1}"
                  .format(dump_path, database))

    def user_statements(self):
        """SQL that creates the tool's database user with its grants"""
        user = "'{0}'@'%'".format(self.config.db_user.replace("'", "''"))
        password = self.config.db_password.replace("'", "''")
        pattern = self.config.db_prefix.replace('_', '\\_') + '%'
        return [
            "CREATE USER IF NOT EXISTS {0} IDENTIFIED BY '{1}';"
            .format(user, password),
            "GRANT ALL PRIVILEGES ON `{0}`.* TO {1};".format(pattern, user),
            "GRANT SELECT, LOCK TABLES, SHOW VIEW, TRIGGER, EVENT ON {0}.* "
            "TO {1};".format(quote_ident(self.config.base_db_name), user),
            "FLUSH PRIVILEGES;",
        ]
