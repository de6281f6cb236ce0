"""Feature-module catalogue and the dependency rules between modules."""
from .registry import CATEGORIES, Module, ModuleRegistry, SYSTEM_MODULES, build_registry, get_registry
from .dependencies import (
    DependencyCheck,
    RemovalPlan,
    auto_fix,
    default_modules_for_role,
    out_of_role,
    plan_addition,
    plan_removal,
    role_errors,
    select_all_for_role,
    select_required,
    validate_selection,
)

__all__ = [
    'CATEGORIES',
    'Module',
    'ModuleRegistry',
    'SYSTEM_MODULES',
    'build_registry',
    'get_registry',
    'DependencyCheck',
    'RemovalPlan',
    'auto_fix',
    'default_modules_for_role',
    'out_of_role',
    'plan_addition',
    'plan_removal',
    'role_errors',
    'select_all_for_role',
    'select_required',
    'validate_selection',
]
