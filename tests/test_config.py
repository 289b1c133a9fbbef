import pytest

from conic_scene.config import DEFAULT_PASSES, ResolverConfig, get_resolver_config, set_resolver_config
from conic_scene.model import Line, Point
from conic_scene.resolver import resolve_with_report


@pytest.fixture
def restore_config():
    saved = get_resolver_config()
    yield
    set_resolver_config(saved)


def test_get_returns_independent_copy(restore_config):
    config = get_resolver_config()
    config.passes = 7
    assert get_resolver_config().passes == DEFAULT_PASSES


def test_set_changes_default_pass_count(restore_config):
    set_resolver_config(ResolverConfig(passes=5))
    entities = [Point(id='p', x=1, y=1), Point(id='q', x=2, y=3), Line(id='l', is_free=False, p1_id='p', p2_id='q')]
    assert resolve_with_report(entities).passes == 5
    assert resolve_with_report(entities, passes=2).passes == 2


def test_set_rejects_zero_passes(restore_config):
    with pytest.raises(ValueError):
        set_resolver_config(ResolverConfig(passes=0))
    assert get_resolver_config().passes == DEFAULT_PASSES
