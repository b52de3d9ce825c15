"""reviewsites Shell Functions"""
import os
import subprocess

from reviewsites.core.logging import Log


class CommandExecutionError(Exception):
    """custom Exception for command execution"""

    def __init__(self, command, returncode=None, stderr=''):
        self.command = command
        self.returncode = returncode
        self.stderr = (stderr or '').strip()
        message = "Command failed: {0}".format(' '.join(command))
        if returncode is not None:
            message += " (exit {0})".format(returncode)
        if self.stderr:
            message += ": {0}".format(self.stderr)
        Exception.__init__(self, message)


class RSShellExec():
    """Method to run shell commands"""

    def cmd_exec_stdout(self, command, cwd=None, env=None, log=True):
        """Run command and return its stdout, raise on failure"""
        return RSShellExec.cmd_run(self, command, cwd=cwd, env=env,
                                   log=log).stdout

    def cmd_run(self, command, cwd=None, env=None, stdin=None, stdout=None,
                log=True):
        """Run command, raise CommandExecutionError on non-zero status.

        ``env`` entries are merged over the current environment. When
        ``stdout`` is a file object the output is streamed there and the
        returned CompletedProcess carries no stdout.
        """
        if log:
            Log.debug(self, "Running command: {0}".format(' '.join(command)))
        full_env = None
        if env:
            full_env = dict(os.environ)
            full_env.update(env)
        try:
            proc = subprocess.run(
                command,
                cwd=cwd,
                env=full_env,
                stdin=stdin,
                stdout=stdout if stdout is not None else subprocess.PIPE,
                stderr=subprocess.PIPE,
                encoding='utf-8' if stdout is None else None,
                errors='replace' if stdout is None else None)
        except OSError as e:
            raise CommandExecutionError(command, stderr=str(e))
        if proc.returncode != 0:
            stderr = proc.stderr
            if isinstance(stderr, bytes):
                stderr = stderr.decode('utf-8', 'replace')
            raise CommandExecutionError(command, proc.returncode, stderr)
        if log:
            Log.debug(self, "Command succeeded: {0}".format(command[0]))
        return proc
