import itertools
import random

from dotkit.reconcile import reconcile


def test_dependency_declared_in_brewfile_is_promoted():
    result = reconcile({'git', 'wget'}, {'git', 'htop'}, {'git', 'htop', 'wget'})

    assert result.declared_dependencies == ('wget',)
    assert result.promoted == ('git', 'htop', 'wget')
    assert result.only_in_manifest == ()
    assert result.only_on_system == ('htop',)
    assert not result.in_sync
    assert result.exit_code == 1


def test_all_empty_is_in_sync():
    result = reconcile([], [], [])

    assert result.only_in_manifest == ()
    assert result.only_on_system == ()
    assert result.in_sync
    assert result.exit_code == 0


def test_declared_but_not_installed():
    result = reconcile({'foo'}, set(), set())

    assert result.promoted == ()
    assert result.only_in_manifest == ('foo',)
    assert result.only_on_system == ()
    assert result.exit_code == 1


def test_empty_brewfile_reports_every_leaf():
    result = reconcile([], ['b', 'a'], ['a', 'b', 'c'])

    assert result.only_in_manifest == ()
    assert result.only_on_system == ('a', 'b')


def test_undeclared_dependencies_are_ignored():
    result = reconcile({'git'}, {'git'}, {'git', 'pcre2', 'gettext'})

    assert result.in_sync
    assert result.declared_dependencies == ()


def test_deterministic_across_input_order():
    declared = ['wget', 'git', 'ripgrep', 'foo']
    leaves = ['htop', 'git', 'ripgrep']
    installed = ['git', 'htop', 'ripgrep', 'wget', 'openssl@3']

    first = reconcile(declared, leaves, installed)
    for _ in range(5):
        random.shuffle(declared)
        random.shuffle(leaves)
        random.shuffle(installed)
        assert reconcile(declared, leaves, installed) == first


def test_result_columns_are_sorted():
    result = reconcile(['zeta', 'alpha', 'mid'], ['yak', 'bee'], ['yak', 'bee'])

    assert list(result.only_in_manifest) == sorted(result.only_in_manifest)
    assert list(result.only_on_system) == sorted(result.only_on_system)


def test_every_name_lands_in_exactly_one_bucket():
    universe = ['a', 'b', 'c', 'd']
    subsets = [set(c) for r in range(len(universe) + 1) for c in itertools.combinations(universe, r)]

    for declared, leaves in itertools.product(subsets, repeat=2):
        installed = leaves | {'d'}
        result = reconcile(declared, leaves, installed)
        promoted = set(result.promoted)
        for name in declared | promoted:
            buckets = [
                name in declared and name in promoted,
                name in result.only_in_manifest,
                name in result.only_on_system,
            ]
            assert buckets.count(True) == 1, (declared, leaves, name)
