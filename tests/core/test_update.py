import os
import shutil
import subprocess

import pytest

from reviewsites.core.exc import UpdateError
from reviewsites.core.git import RSGit
from reviewsites.core.registry import SiteRegistry
from reviewsites.core.update import UpdateEngine

from conftest import FakeGit

needs_git = pytest.mark.skipif(shutil.which('git') is None,
                               reason='git is not installed')


def git(cwd, *args):
    return subprocess.run(
        ['git', '-c', 'user.name=Test', '-c', 'user.email=test@example.test',
         '-c', 'init.defaultBranch=main'] + list(args),
        cwd=cwd, check=True, capture_output=True, text=True).stdout


def commit(repo, name, content, message):
    with open(os.path.join(repo, name), 'w') as f:
        f.write(content)
    git(repo, 'add', name)
    git(repo, 'commit', '-q', '-m', message)


@pytest.fixture
def upstream(tmp_path):
    repo = str(tmp_path / 'upstream')
    os.makedirs(repo)
    git(repo, 'init', '-q')
    git(repo, 'checkout', '-q', '-b', 'feature/login-fix')
    commit(repo, 'index.php', '<?php // v1\n', 'Initial commit')
    return repo


@pytest.fixture
def site(ctx, config, upstream):
    site = SiteRegistry(ctx, config).record('feature-login-fix',
                                            'feature/login-fix')
    RSGit(ctx).clone(upstream, 'feature/login-fix', site.source_root)
    return site


@needs_git
def test_remote_branch_exists(ctx, upstream):
    assert RSGit(ctx).remote_branch_exists(upstream, 'feature/login-fix')
    assert not RSGit(ctx).remote_branch_exists(upstream, 'nope')


@needs_git
def test_check_up_to_date(ctx, site):
    assert UpdateEngine(ctx).check(site) == []


@needs_git
def test_check_and_apply(ctx, site, upstream):
    commit(upstream, 'index.php', '<?php // v2\n', 'Fix login redirect')
    commit(upstream, 'README.md', 'docs\n', 'Document login')
    engine = UpdateEngine(ctx)

    summaries = engine.check(site)
    assert [s.split(' ', 1)[1] for s in summaries] == ['Document login',
                                                       'Fix login redirect']

    index = os.path.join(site.source_root, 'index.php')
    with open(index, 'w') as f:
        f.write('local edit\n')
    engine.apply(site)
    with open(index) as f:
        assert f.read() == '<?php // v2\n'
    assert RSGit(ctx).current_commit(site.source_root) == \
        git(upstream, 'rev-parse', 'HEAD').strip()
    assert engine.check(site) == []


def test_fetch_failure_is_update_error(ctx, config):
    site = SiteRegistry(ctx, config).build('site-x', 'site-x')
    fake = FakeGit()
    fake.fail.add('fetch')
    with pytest.raises(UpdateError):
        UpdateEngine(ctx, git=fake).check(site)


def test_apply_resets_before_fast_forward(ctx, config):
    site = SiteRegistry(ctx, config).build('site-x', 'site-x')
    fake = FakeGit()
    UpdateEngine(ctx, git=fake).apply(site)
    assert [call[0] for call in fake.calls] == ['reset', 'merge']
    fake.fail.add('merge')
    with pytest.raises(UpdateError):
        UpdateEngine(ctx, git=fake).apply(site)
