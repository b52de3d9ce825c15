"""reviewsites git module

Thin wrappers over the git command line used for site checkouts.
"""
from reviewsites.core.logging import Log
from reviewsites.core.shellexec import RSShellExec


class RSGit:
    """Source control capability for site checkouts"""

    def __init__(self, app, git='git'):
        self.app = app
        self.git = git

    def _run(self, args, cwd=None):
        return RSShellExec.cmd_exec_stdout(self.app, [self.git] + args,
                                           cwd=cwd)

    def remote_branch_exists(self, remote, branch):
        """Check the remote for refs/heads/<branch>"""
        out = self._run(['ls-remote', '--heads', remote,
                         'refs/heads/{0}'.format(branch)])
        return bool(out.strip())

    def clone(self, remote, branch, dest):
        Log.debug(self.app, "Cloning {0} ({1}) into {2}"
                  .format(remote, branch, dest))
        self._run(['clone', '--branch', branch, '--single-branch',
                   remote, dest])

    def fetch(self, repo, branch):
        self._run(['fetch', 'origin', branch], cwd=repo)

    def current_branch(self, repo):
        return self._run(['rev-parse', '--abbrev-ref', 'HEAD'],
                         cwd=repo).strip()

    def current_commit(self, repo, ref='HEAD'):
        return self._run(['rev-parse', ref], cwd=repo).strip()

    def pending_commits(self, repo, branch):
        """One-line summaries of origin/<branch> commits missing from HEAD"""
        out = self._run(['log', '--oneline', '--no-decorate',
                         'HEAD..origin/{0}'.format(branch)], cwd=repo)
        return [line for line in out.splitlines() if line.strip()]

    def reset_hard(self, repo):
        self._run(['reset', '--hard', 'HEAD'], cwd=repo)

    def fast_forward(self, repo, branch):
        self._run(['merge', '--ff-only', 'origin/{0}'.format(branch)],
                  cwd=repo)
