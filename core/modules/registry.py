"""
Static catalogue of feature modules.

Every screen of the back office belongs to a module.  A module may depend
on other modules (``prontuario`` is useless without ``guests``) and the
reverse edges (``required_by``) are derived here once, when the registry is
built, so the two directions can never drift apart.

The registry is immutable.  ``build_registry`` validates a table of
definitions (unique ids, known categories and roles, no dangling edges, no
cycles) and raises ``ImproperlyConfigured`` on the first problem so that a
broken table stops the process at start-up instead of surfacing as odd
permission results later.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field, replace
from functools import lru_cache
from types import MappingProxyType

from django.core.exceptions import ImproperlyConfigured

logger = logging.getLogger(__name__)

CATEGORIES = ('core', 'clinical', 'administrative', 'support')

# staff < admin
ROLE_ORDER = {'staff': 0, 'admin': 1}


def role_rank(role: str | None) -> int:
    """Rank of a role; unknown roles rank as the lowest one."""
    return ROLE_ORDER.get(role or '', 0)


@dataclass(frozen=True)
class Module:
    id: str
    name: str
    description: str = ''
    icon: str = ''
    category: str = 'core'
    min_role: str = 'staff'
    dependencies: frozenset[str] = field(default_factory=frozenset)
    required_by: frozenset[str] = field(default_factory=frozenset)
    is_required: bool = False

    def visible_for(self, role: str | None) -> bool:
        return role_rank(self.min_role) <= role_rank(role)

    def as_dict(self) -> dict:
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'icon': self.icon,
            'category': self.category,
            'minRole': self.min_role,
            'dependencies': sorted(self.dependencies),
            'requiredBy': sorted(self.required_by),
            'isRequired': self.is_required,
        }


class ModuleRegistry(Mapping):
    """Read-only ``id -> Module`` mapping with graph helpers.

    The constructor only derives ``required_by``; it does not validate.  Use
    :func:`build_registry` for tables that come from configuration.
    """

    def __init__(self, modules: Iterable[Module]):
        modules = list(modules)
        reverse: dict[str, set[str]] = {m.id: set() for m in modules}
        for module in modules:
            for dep in module.dependencies:
                reverse.setdefault(dep, set()).add(module.id)
        self._modules = MappingProxyType({
            m.id: replace(
                m,
                dependencies=frozenset(m.dependencies),
                required_by=frozenset(reverse[m.id]),
            )
            for m in modules
        })

    def __getitem__(self, module_id: str) -> Module:
        return self._modules[module_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._modules)

    def __len__(self) -> int:
        return len(self._modules)

    def __repr__(self) -> str:
        return f"ModuleRegistry({list(self._modules)})"

    def ids(self) -> list[str]:
        return list(self._modules)

    def all(self) -> list[Module]:
        return list(self._modules.values())

    def required_ids(self) -> frozenset[str]:
        return frozenset(m.id for m in self._modules.values() if m.is_required)

    def by_category(self, category: str) -> list[Module]:
        return [m for m in self._modules.values() if m.category == category]

    def visible_for_role(self, role: str | None) -> list[Module]:
        return [m for m in self._modules.values() if m.visible_for(role)]

    def ordered(self, module_ids: Iterable[str]) -> list[str]:
        """Known ids in table order, followed by unknown ids sorted."""
        wanted = set(module_ids)
        known = [mid for mid in self._modules if mid in wanted]
        return known + sorted(wanted.difference(self._modules))

    def transitive_dependencies(self, module_id: str) -> frozenset[str]:
        """Every module reachable by following ``dependencies`` edges."""
        return self._walk(module_id, 'dependencies')

    def transitive_dependents(self, module_id: str) -> frozenset[str]:
        """Every module that needs ``module_id``, directly or indirectly."""
        return self._walk(module_id, 'required_by')

    def _walk(self, start: str, edge: str) -> frozenset[str]:
        """Depth-first closure of ``start`` along ``edge``, excluding ``start``.

        A back edge to any module on the current path is logged and not
        followed, so tables that skipped :func:`build_registry` still
        terminate.
        """
        seen: set[str] = set()
        if start not in self._modules:
            return frozenset()
        path = [start]
        on_path = {start}
        iters = [iter(sorted(getattr(self._modules[start], edge)))]
        while iters:
            nxt = next(iters[-1], None)
            if nxt is None:
                iters.pop()
                on_path.discard(path.pop())
                continue
            if nxt in on_path:
                logger.warning('module graph cycle %s (%s)', ' -> '.join(path[path.index(nxt):] + [nxt]), edge)
                continue
            if nxt in seen:
                continue
            seen.add(nxt)
            module = self._modules.get(nxt)
            if module is None:
                continue
            path.append(nxt)
            on_path.add(nxt)
            iters.append(iter(sorted(getattr(module, edge))))
        return frozenset(seen)


def _find_cycle(modules: Mapping[str, Module]) -> list[str] | None:
    """Return one dependency cycle as a path (first id repeated at the end)."""
    done: set[str] = set()
    for root in modules:
        if root in done:
            continue
        path: list[str] = [root]
        on_path = {root}
        iters = [iter(sorted(modules[root].dependencies))]
        while iters:
            nxt = next(iters[-1], None)
            if nxt is None:
                iters.pop()
                finished = path.pop()
                on_path.discard(finished)
                done.add(finished)
                continue
            if nxt in on_path:
                return path[path.index(nxt):] + [nxt]
            if nxt in done:
                continue
            path.append(nxt)
            on_path.add(nxt)
            iters.append(iter(sorted(modules[nxt].dependencies)))
    return None


def build_registry(definitions: Iterable[Module]) -> ModuleRegistry:
    """Validate ``definitions`` and return the registry built from them."""
    table: dict[str, Module] = {}
    for module in definitions:
        if module.id in table:
            raise ImproperlyConfigured(f"duplicate module id {module.id!r}")
        if module.category not in CATEGORIES:
            raise ImproperlyConfigured(f"module {module.id!r} has unknown category {module.category!r}")
        if module.min_role not in ROLE_ORDER:
            raise ImproperlyConfigured(f"module {module.id!r} has unknown minRole {module.min_role!r}")
        table[module.id] = module

    for module in table.values():
        if module.id in module.dependencies:
            raise ImproperlyConfigured(f"module {module.id!r} depends on itself")
        unknown = sorted(set(module.dependencies).difference(table))
        if unknown:
            raise ImproperlyConfigured(f"module {module.id!r} depends on unknown modules {unknown}")

    cycle = _find_cycle(table)
    if cycle:
        raise ImproperlyConfigured("module dependency cycle: " + " -> ".join(cycle))

    return ModuleRegistry(table.values())


SYSTEM_MODULES: tuple[Module, ...] = (
    Module(
        id='dashboard', name='Dashboard',
        description='Visão geral do sistema e estatísticas principais',
        icon='Home', category='core', min_role='staff', is_required=True,
    ),
    Module(
        id='profile', name='Meu Perfil',
        description='Configurações pessoais do usuário',
        icon='Settings', category='core', min_role='staff', is_required=True,
    ),
    Module(
        id='guests', name='Hóspedes',
        description='Cadastro e gestão de residentes',
        icon='User', category='core', min_role='admin',
    ),
    Module(
        id='employees', name='Colaboradores',
        description='Gestão de funcionários e equipe',
        icon='Users', category='administrative', min_role='admin',
    ),
    Module(
        id='prontuario', name='Prontuário Eletrônico',
        description='Sistema de evoluções multidisciplinares',
        icon='FileText', category='clinical', min_role='staff',
        dependencies=frozenset({'guests'}),
    ),
    Module(
        id='schedules', name='Escalas',
        description='Gestão de escalas de trabalho',
        icon='Calendar', category='administrative', min_role='staff',
        dependencies=frozenset({'employees'}),
    ),
    Module(
        id='sobreaviso', name='Sobreaviso',
        description='Colaboradores para substituições',
        icon='Clock', category='administrative', min_role='staff',
        dependencies=frozenset({'employees'}),
    ),
    Module(
        id='cardapio', name='Cardápio',
        description='Planejamento de cardápios semanais',
        icon='ChefHat', category='support', min_role='staff',
    ),
    Module(
        id='documents', name='Modelos',
        description='Modelos de documentos e templates',
        icon='FileText', category='administrative', min_role='admin',
    ),
    Module(
        id='katz', name='Escala de Katz',
        description='Avaliação funcional dos residentes',
        icon='Clipboard', category='clinical', min_role='staff',
        dependencies=frozenset({'guests'}),
    ),
    Module(
        id='agravos', name='Agravos',
        description='Controle de intercorrências e eventos adversos',
        icon='AlertTriangle', category='clinical', min_role='staff',
        dependencies=frozenset({'guests'}),
    ),
    Module(
        id='certificates', name='Certificados',
        description='Gestão de certificados obrigatórios',
        icon='FileCheck', category='administrative', min_role='admin',
    ),
    Module(
        id='nfrda', name='NF + RDA',
        description='Controle de notas fiscais e relatórios',
        icon='Receipt', category='administrative', min_role='admin',
        dependencies=frozenset({'employees'}),
    ),
    Module(
        id='users', name='Usuários',
        description='Gestão de usuários e permissões',
        icon='UserCog', category='administrative', min_role='admin',
    ),
    Module(
        id='crm-leads', name='CRM - Leads',
        description='Gestão de leads comerciais e contatos',
        icon='UserPlus', category='administrative', min_role='admin',
    ),
    Module(
        id='crm-pipeline', name='CRM - Pipeline',
        description='Funil de vendas e acompanhamento',
        icon='Kanban', category='administrative', min_role='admin',
        dependencies=frozenset({'crm-leads'}),
    ),
    Module(
        id='crm-inbox', name='CRM - Inbox',
        description='Central de mensagens e comunicação',
        icon='MessageCircle', category='administrative', min_role='admin',
        dependencies=frozenset({'crm-leads'}),
    ),
    Module(
        id='crm-reports', name='CRM - Relatórios',
        description='Análises e métricas de vendas',
        icon='BarChart3', category='administrative', min_role='admin',
        dependencies=frozenset({'crm-leads'}),
    ),
    Module(
        id='talent-bank', name='Banco de Talentos',
        description='Recrutamento e acompanhamento de candidatos',
        icon='Briefcase', category='administrative', min_role='admin',
    ),
    Module(
        id='financial', name='Financeiro',
        description='Gestão financeira e receitas dos hóspedes',
        icon='DollarSign', category='administrative', min_role='admin',
        dependencies=frozenset({'guests'}),
    ),
)


@lru_cache(maxsize=None)
def get_registry() -> ModuleRegistry:
    """Process-wide registry built from :data:`SYSTEM_MODULES`."""
    return build_registry(SYSTEM_MODULES)
