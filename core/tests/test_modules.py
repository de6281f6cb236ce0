"""
Registry and dependency resolution tests.

Most tests run against a small hand-built graph so the expectations can be
read off the table directly; the last few check the shipped module table.
"""
import itertools
import logging
import random

import pytest
from django.core.exceptions import ImproperlyConfigured

from core.exceptions import ModuleRequiredError
from core.modules import (
    SYSTEM_MODULES,
    Module,
    ModuleRegistry,
    auto_fix,
    build_registry,
    default_modules_for_role,
    get_registry,
    out_of_role,
    plan_addition,
    plan_removal,
    role_errors,
    select_all_for_role,
    select_required,
    validate_selection,
)


def mod(id, deps=(), required=False, min_role='staff', category='core'):
    return Module(id=id, name=id.upper(), category=category, min_role=min_role,
                  dependencies=frozenset(deps), is_required=required)


@pytest.fixture
def small():
    # home is required; c -> b -> a; d -> a; e stands alone
    return build_registry([
        mod('home', required=True),
        mod('a', min_role='admin'),
        mod('b', deps=['a']),
        mod('c', deps=['b']),
        mod('d', deps=['a']),
        mod('e'),
    ])


def test_required_by_is_derived_from_dependencies(small):
    assert small['a'].required_by == {'b', 'd'}
    assert small['b'].required_by == {'c'}
    assert small['c'].required_by == frozenset()
    for module in small.values():
        for dep in module.dependencies:
            assert module.id in small[dep].required_by


def test_constructor_ignores_declared_required_by():
    reg = ModuleRegistry([Module(id='x', name='X', required_by=frozenset({'bogus'}))])
    assert reg['x'].required_by == frozenset()


def test_transitive_closures(small):
    assert small.transitive_dependencies('c') == {'a', 'b'}
    assert small.transitive_dependents('a') == {'b', 'c', 'd'}
    assert small.transitive_dependencies('unknown') == frozenset()


@pytest.mark.parametrize('table, message', [
    ([mod('a'), mod('a')], 'duplicate'),
    ([mod('a', deps=['a'])], 'itself'),
    ([mod('a', deps=['zzz'])], 'unknown modules'),
    ([mod('a', category='nope')], 'category'),
    ([mod('a', min_role='root')], 'minRole'),
])
def test_build_registry_rejects_bad_tables(table, message):
    with pytest.raises(ImproperlyConfigured, match=message):
        build_registry(table)


def test_build_registry_reports_cycle_path():
    with pytest.raises(ImproperlyConfigured) as exc:
        build_registry([mod('a', deps=['c']), mod('b', deps=['a']), mod('c', deps=['b'])])
    assert 'cycle' in str(exc.value)
    assert 'a' in str(exc.value) and 'c' in str(exc.value)


def test_walk_terminates_on_cyclic_graph_built_without_validation():
    reg = ModuleRegistry([mod('a', deps=['b']), mod('b', deps=['a'])])
    assert reg.transitive_dependencies('a') == {'b'}


@pytest.fixture
def core_logs(caplog, monkeypatch):
    # the "core" logger does not propagate to the root handler caplog uses
    monkeypatch.setattr(logging.getLogger('core'), 'propagate', True)
    return caplog


def test_walk_logs_cycle_that_does_not_pass_through_start(core_logs):
    reg = ModuleRegistry([mod('a', deps=['b']), mod('b', deps=['c']), mod('c', deps=['b'])])
    with core_logs.at_level('WARNING', logger='core.modules.registry'):
        assert reg.transitive_dependencies('a') == {'b', 'c'}
    assert 'b -> c -> b' in core_logs.text


def test_walk_does_not_log_diamonds(core_logs):
    reg = ModuleRegistry([mod('a', deps=['b', 'c']), mod('b', deps=['d']), mod('c', deps=['d']), mod('d')])
    with core_logs.at_level('WARNING', logger='core.modules.registry'):
        assert reg.transitive_dependencies('a') == {'b', 'c', 'd'}
    assert core_logs.text == ''


def test_out_of_role_allows_dependencies_of_visible_modules(small):
    assert out_of_role({'home', 'a'}, 'staff', registry=small) == {'a'}
    assert out_of_role({'home', 'a', 'b'}, 'staff', registry=small) == frozenset()
    assert out_of_role({'home', 'a'}, 'admin', registry=small) == frozenset()
    assert out_of_role({'ghost'}, 'staff', registry=small) == frozenset()


def test_role_errors_name_the_module(small):
    assert role_errors({'a'}, 'staff', registry=small) == ['A não está disponível para o perfil staff']


def test_validate_reports_missing_dependency_with_warning(small):
    check = validate_selection({'home', 'c'}, registry=small)
    assert not check.is_valid
    assert check.missing_dependencies == {'a', 'b'}
    assert 'C requer B' in check.warnings
    assert 'C requer A' in check.warnings
    assert check.affected_modules == {'b'}


def test_validate_flags_missing_required(small):
    check = validate_selection({'e'}, registry=small)
    assert not check.is_valid
    assert check.missing_required == {'home'}
    assert 'HOME é obrigatório' in check.warnings


def test_validate_keeps_unknown_ids_as_warning_only(small):
    check = validate_selection({'home', 'ghost'}, registry=small)
    assert check.is_valid
    assert check.unknown_modules == {'ghost'}
    assert 'Módulo desconhecido: ghost' in check.warnings


def test_validate_warnings_are_not_duplicated(small):
    check = validate_selection({'home', 'c', 'd'}, registry=small)
    assert len(check.warnings) == len(set(check.warnings))


def test_auto_fix_adds_closure_and_required(small):
    assert auto_fix({'c'}, registry=small) == {'home', 'a', 'b', 'c'}
    assert auto_fix(set(), registry=small) == {'home'}


def test_plan_addition_pulls_dependencies(small):
    assert plan_addition({'home'}, 'd', registry=small) == {'home', 'a', 'd'}


def test_plan_removal_takes_dependents_along(small):
    plan = plan_removal({'home', 'a', 'b', 'c', 'e'}, 'a', registry=small)
    assert plan.affected == {'b', 'c'}
    assert plan.remaining == {'home', 'e'}
    assert plan.requires_confirmation


def test_plan_removal_of_leaf_needs_no_confirmation(small):
    plan = plan_removal({'home', 'e'}, 'e', registry=small)
    assert plan.affected == frozenset()
    assert plan.remaining == {'home'}
    assert not plan.requires_confirmation


def test_plan_removal_of_unselected_or_unknown_is_empty(small):
    assert plan_removal({'home'}, 'c', registry=small).remaining == {'home'}
    assert plan_removal({'home'}, 'ghost', registry=small).affected == frozenset()


def test_plan_removal_refuses_required(small):
    with pytest.raises(ModuleRequiredError):
        plan_removal({'home', 'e'}, 'home', registry=small)


def test_role_presets(small):
    assert default_modules_for_role('staff', registry=small) == {'home'}
    assert default_modules_for_role('admin', registry=small) == {'home', 'a', 'b', 'c', 'd', 'e'}
    assert select_all_for_role('staff', registry=small) >= {'b', 'c', 'd', 'e'}
    assert select_required(registry=small) == {'home'}


def _subsets(ids):
    for n in range(len(ids) + 1):
        yield from itertools.combinations(ids, n)


def test_every_subset_of_small_graph(small):
    for subset in _subsets(small.ids()):
        chosen = frozenset(subset)
        fixed = auto_fix(chosen, registry=small)
        assert fixed >= chosen
        assert validate_selection(fixed, registry=small).is_valid
        assert auto_fix(fixed, registry=small) == fixed
        check = validate_selection(chosen, registry=small)
        assert check.is_valid == (fixed == chosen)
        for module_id in chosen - small.required_ids():
            plan = plan_removal(fixed, module_id, registry=small)
            assert module_id not in plan.remaining
            assert validate_selection(plan.remaining, registry=small).is_valid


def test_random_selections_of_shipped_table():
    registry = get_registry()
    rng = random.Random(20240601)
    ids = registry.ids()
    for _ in range(200):
        chosen = frozenset(rng.sample(ids, rng.randint(0, len(ids))))
        fixed = auto_fix(chosen, registry=registry)
        assert validate_selection(fixed, registry=registry).is_valid
        assert fixed - chosen <= set().union(
            registry.required_ids(), *(registry.transitive_dependencies(m) for m in chosen)
        )


def test_shipped_table_is_consistent():
    registry = build_registry(SYSTEM_MODULES)
    assert len(registry) == len(SYSTEM_MODULES)
    assert registry.required_ids() == {'dashboard', 'profile'}
    assert 'guests' in registry['prontuario'].dependencies
    assert registry['guests'].required_by >= {'prontuario', 'katz', 'agravos', 'financial'}
    assert registry.transitive_dependents('crm-leads') == {'crm-pipeline', 'crm-inbox', 'crm-reports'}
