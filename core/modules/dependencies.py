"""
Validation and repair of module selections.

All functions here are pure.  They take the registry as a keyword argument
(defaulting to the process-wide one) so tests can run them against small
hand-built graphs.  None of them raise for user input, except
:func:`plan_removal`, which refuses to plan the removal of a required module.
"""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from core.exceptions import ModuleRequiredError

from .registry import ModuleRegistry, get_registry


def _name(registry: ModuleRegistry, module_id: str) -> str:
    module = registry.get(module_id)
    return module.name if module is not None else module_id


@dataclass(frozen=True)
class DependencyCheck:
    is_valid: bool
    missing_dependencies: frozenset[str] = field(default_factory=frozenset)
    affected_modules: frozenset[str] = field(default_factory=frozenset)
    missing_required: frozenset[str] = field(default_factory=frozenset)
    unknown_modules: frozenset[str] = field(default_factory=frozenset)
    warnings: tuple[str, ...] = ()

    def as_dict(self) -> dict:
        return {
            'isValid': self.is_valid,
            'missingDependencies': sorted(self.missing_dependencies),
            'affectedModules': sorted(self.affected_modules),
            'missingRequired': sorted(self.missing_required),
            'unknownModules': sorted(self.unknown_modules),
            'warnings': list(self.warnings),
        }


@dataclass(frozen=True)
class RemovalPlan:
    module_id: str
    affected: frozenset[str]
    remaining: frozenset[str]

    @property
    def requires_confirmation(self) -> bool:
        return bool(self.affected)

    def as_dict(self) -> dict:
        return {
            'moduleId': self.module_id,
            'affected': sorted(self.affected),
            'remaining': sorted(self.remaining),
            'requiresConfirmation': self.requires_confirmation,
        }


def validate_selection(selected: Iterable[str], *, registry: ModuleRegistry | None = None) -> DependencyCheck:
    """Check a proposed set of enabled modules.

    The selection is valid when every transitive dependency of every
    selected module is selected too and all required modules are present.
    ``affected_modules`` lists absent modules that something selected
    relies on; it is informative and does not change ``is_valid``.
    """
    if registry is None:
        registry = get_registry()
    chosen = frozenset(selected)
    warnings: list[str] = []

    unknown = chosen.difference(registry)
    for module_id in sorted(unknown):
        warnings.append(f"Módulo desconhecido: {module_id}")

    missing: set[str] = set()
    for module_id in registry.ordered(chosen.difference(unknown)):
        for dep in registry.ordered(registry.transitive_dependencies(module_id)):
            if dep not in chosen:
                missing.add(dep)
                warnings.append(f"{_name(registry, module_id)} requer {_name(registry, dep)}")

    affected: set[str] = set()
    for module in registry.all():
        if module.id in chosen:
            continue
        users = registry.ordered(module.required_by.intersection(chosen))
        if users:
            affected.add(module.id)
            for user_id in users:
                warnings.append(f"{_name(registry, user_id)} não funcionará sem {module.name}")

    missing_required = registry.required_ids().difference(chosen)
    for module_id in registry.ordered(missing_required):
        warnings.append(f"{_name(registry, module_id)} é obrigatório")

    return DependencyCheck(
        is_valid=not missing and not missing_required,
        missing_dependencies=frozenset(missing),
        affected_modules=frozenset(affected),
        missing_required=frozenset(missing_required),
        unknown_modules=frozenset(unknown),
        warnings=tuple(dict.fromkeys(warnings)),
    )


def auto_fix(selected: Iterable[str], *, registry: ModuleRegistry | None = None) -> frozenset[str]:
    """Selection plus every missing dependency plus every required module."""
    if registry is None:
        registry = get_registry()
    fixed = set(selected)
    for module_id in list(fixed):
        fixed |= registry.transitive_dependencies(module_id)
    fixed |= registry.required_ids()
    return frozenset(fixed)


def plan_addition(selected: Iterable[str], module_id: str, *, registry: ModuleRegistry | None = None) -> frozenset[str]:
    return auto_fix(set(selected) | {module_id}, registry=registry)


def plan_removal(selected: Iterable[str], module_id: str, *, registry: ModuleRegistry | None = None) -> RemovalPlan:
    """Work out what else goes away when ``module_id`` is switched off.

    ``affected`` holds the selected modules that depend on ``module_id``
    directly or transitively; they are removed together with it.
    """
    if registry is None:
        registry = get_registry()
    chosen = frozenset(selected)
    module = registry.get(module_id)
    if module is not None and module.is_required:
        raise ModuleRequiredError(f"{module.name} é obrigatório e não pode ser removido")
    if module is None or module_id not in chosen:
        return RemovalPlan(module_id=module_id, affected=frozenset(), remaining=chosen - {module_id})
    affected = registry.transitive_dependents(module_id) & chosen
    return RemovalPlan(
        module_id=module_id,
        affected=frozenset(affected),
        remaining=chosen - {module_id} - affected,
    )


def default_modules_for_role(role: str, *, registry: ModuleRegistry | None = None) -> frozenset[str]:
    """Seed for a new account: required modules, plus staff-level ones for admins."""
    if registry is None:
        registry = get_registry()
    seed = {
        m.id for m in registry.all()
        if m.is_required or (role == 'admin' and m.min_role == 'staff')
    }
    return auto_fix(seed, registry=registry)


def select_all_for_role(role: str, *, registry: ModuleRegistry | None = None) -> frozenset[str]:
    if registry is None:
        registry = get_registry()
    return auto_fix((m.id for m in registry.visible_for_role(role)), registry=registry)


def select_required(*, registry: ModuleRegistry | None = None) -> frozenset[str]:
    return auto_fix((), registry=registry)


def out_of_role(selected: Iterable[str], role: str | None, *, registry: ModuleRegistry | None = None) -> frozenset[str]:
    """Selected modules above ``role`` that no role-visible selection pulls in.

    A staff account may hold ``guests`` because ``prontuario`` needs it, but
    asking for ``guests`` on its own, or for ``crm-leads``, is out of role.
    Unknown ids are left to :func:`validate_selection`.
    """
    if registry is None:
        registry = get_registry()
    chosen = frozenset(selected).intersection(registry)
    allowed = {mid for mid in chosen if registry[mid].visible_for(role)}
    pulled: set[str] = set()
    for module_id in allowed:
        pulled |= registry.transitive_dependencies(module_id)
    return frozenset(mid for mid in chosen if mid not in allowed and mid not in pulled)


def role_errors(selected: Iterable[str], role: str | None, *, registry: ModuleRegistry | None = None) -> list[str]:
    if registry is None:
        registry = get_registry()
    return [
        f"{_name(registry, mid)} não está disponível para o perfil {role or 'staff'}"
        for mid in registry.ordered(out_of_role(selected, role, registry=registry))
    ]
