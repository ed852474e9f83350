import pytest

from lru_cache import LRUCache


def test_get_and_set():
    cache = LRUCache(10)
    assert cache.get('a') is None
    cache.set('a', 'n1')
    assert cache.get('a') == 'n1'
    assert 'a' in cache
    assert len(cache) == 1


def test_evicts_least_recently_used():
    cache = LRUCache(2)
    cache.set('a', 'n1')
    cache.set('b', 'n2')
    cache.get('a')
    cache.set('c', 'n3')
    assert 'b' not in cache
    assert cache.get('a') == 'n1'
    assert cache.get('c') == 'n3'
    assert len(cache) == 2


def test_update_matching_rewrites_only_matching_values():
    cache = LRUCache(10)
    cache.set('a', 'n1')
    cache.set('b', 'n2')
    cache.set('c', 'n1')
    assert cache.update_matching('n1', 'n9') == 2
    assert dict(cache.items()) == {'a': 'n9', 'b': 'n2', 'c': 'n9'}


def test_update_matching_keeps_recency():
    cache = LRUCache(2)
    cache.set('a', 'n1')
    cache.set('b', 'n2')
    cache.update_matching('n1', 'n9')
    cache.set('c', 'n3')
    assert 'a' not in cache


def test_clear():
    cache = LRUCache(10)
    cache.set('a', 'n1')
    cache.clear()
    assert len(cache) == 0


def test_rejects_zero_size():
    with pytest.raises(ValueError):
        LRUCache(0)
