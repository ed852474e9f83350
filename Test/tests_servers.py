import pytest

from servers import (
    NodeOptions, OptionsMap, ServerList, Single, WeightedMap,
    make_node, parse_servers, split_address, to_server_spec,
)


def test_raw_input_lifts_to_variants():
    assert to_server_spec('a:1') == Single('a:1')
    assert to_server_spec(['a:1', 'b:1']) == ServerList(('a:1', 'b:1'))
    assert to_server_spec({'a:1': 2}) == WeightedMap({'a:1': 2})
    assert to_server_spec({'a:1': {'vnodes': 5}}) == OptionsMap({'a:1': NodeOptions(vnodes=5)})
    assert to_server_spec(None) == ServerList(())


def test_mixed_map_becomes_options():
    spec = to_server_spec({'a:1': 3, 'b:1': {'vnodes': 5}})
    assert spec == OptionsMap({'a:1': NodeOptions(weight=3), 'b:1': NodeOptions(vnodes=5)})


def test_list_has_equal_weights_and_dedupes():
    nodes = parse_servers(ServerList.of(['a:1', 'b:1', 'a:1']))
    assert [n.id for n in nodes] == ['a:1', 'b:1']
    assert all(n.weight == 1 and n.vnodes is None for n in nodes)


def test_options_map():
    nodes = parse_servers(OptionsMap.of({'a:1': {'weight': 3, 'vnodes': 7}, 'b:1': {}}))
    assert (nodes[0].weight, nodes[0].vnodes) == (3, 7)
    assert (nodes[1].weight, nodes[1].vnodes) == (1, None)


def test_zero_vnodes_means_default():
    assert make_node('a:1', vnodes=0).vnodes is None


@pytest.mark.parametrize('weight', [0, -1, 'heavy', True])
def test_bad_weight(weight):
    with pytest.raises(ValueError):
        make_node('a:1', weight=weight)


def test_bad_vnodes():
    with pytest.raises(ValueError):
        make_node('a:1', vnodes=-3)
    with pytest.raises(ValueError):
        make_node('a:1', vnodes=2.5)


def test_split_address():
    assert split_address('10.0.1.1:11211') == ('10.0.1.1', 11211)
    assert split_address('[::1]:11211') == ('::1', 11211)
    assert split_address('::1') == ('::1', None)
    assert split_address('cache-a') == ('cache-a', None)


def test_renamed_node_keeps_weight():
    node = make_node('10.0.0.1:11211', weight=4, vnodes=9).renamed('10.0.0.2:11212')
    assert (node.id, node.host, node.port, node.weight, node.vnodes) == ('10.0.0.2:11212', '10.0.0.2', 11212, 4, 9)
