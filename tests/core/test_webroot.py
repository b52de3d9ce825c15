import dataclasses
import os

import pytest

from reviewsites.core.exc import PublishError
from reviewsites.core.registry import SiteRegistry
from reviewsites.core.webroot import WebrootPublisher


def links(webroot):
    return {entry.name: os.readlink(entry.path)
            for entry in os.scandir(webroot) if entry.is_symlink()}


def test_rebuild_creates_missing_webroot(ctx, config):
    registry = SiteRegistry(ctx, config)
    registry.record('site-x', 'site-x')
    publisher = WebrootPublisher(ctx, config)
    assert not os.path.exists(config.webroot)
    publisher.rebuild(registry.sites(), config.base_domains)
    assert links(config.webroot) == {
        'site-x.review.example.test':
            os.path.join('..', 'sites', 'site-x', 'src'),
    }
    target = os.path.join(config.webroot, 'site-x.review.example.test')
    assert os.path.realpath(target) == os.path.realpath(
        registry.load('site-x').source_root)


def test_rebuild_is_idempotent_and_drops_stale_links(ctx, config):
    registry = SiteRegistry(ctx, config)
    for site_id in ('a', 'b'):
        registry.record(site_id, site_id)
    publisher = WebrootPublisher(ctx, config)
    domains = ('review.example.test', 'other.test')
    os.makedirs(config.webroot)
    os.symlink('/nowhere', os.path.join(config.webroot, 'stale.test'))
    with open(os.path.join(config.webroot, 'index.html'), 'w') as f:
        f.write('keep me')

    publisher.rebuild(registry.sites(), domains)
    first = links(config.webroot)
    publisher.rebuild(registry.sites(), domains)
    assert links(config.webroot) == first
    assert sorted(first) == ['a.other.test', 'a.review.example.test',
                             'b.other.test', 'b.review.example.test']
    assert os.path.isfile(os.path.join(config.webroot, 'index.html'))


def test_rebuild_with_no_sites(ctx, config):
    os.makedirs(config.webroot)
    os.symlink('/nowhere', os.path.join(config.webroot, 'old.test'))
    assert WebrootPublisher(ctx, config).rebuild([], config.base_domains) \
        == 0
    assert links(config.webroot) == {}


def test_unusable_webroot(ctx, config, tmp_path):
    blocker = tmp_path / 'blocker'
    blocker.write_text('')
    config = dataclasses.replace(config, webroot=str(blocker / 'webroot'))
    with pytest.raises(PublishError):
        WebrootPublisher(ctx, config).rebuild([], config.base_domains)
