import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from core.models import User
from core.services.permissions import set_user_modules


@pytest.fixture(autouse=True)
def _clear_cache():
    # throttle counters live in the cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def make_user(db):
    def _make(username, role='staff', position='', modules=None, **extra):
        user = User.objects.create_user(
            username=username, password='P@ssw0rd1', role=role, position=position, **extra
        )
        if modules is not None:
            set_user_modules(user, modules)
        return user
    return _make


@pytest.fixture
def admin_user(make_user):
    return make_user('admin1', role='admin', position='Administrador', first_name='Ana', last_name='Admin',
                     modules=['users', 'guests', 'prontuario', 'crm-leads', 'crm-pipeline', 'crm-inbox',
                              'crm-reports', 'talent-bank'])


@pytest.fixture
def api():
    return APIClient()


@pytest.fixture
def admin_client(api, admin_user):
    api.force_authenticate(user=admin_user)
    return api
