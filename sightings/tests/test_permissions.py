from types import SimpleNamespace

from django.test import SimpleTestCase

from sightings.permissions import IsAdminRole


class IsAdminRoleTests(SimpleTestCase):
    def setUp(self):
        self.permission = IsAdminRole()
        self.view = object()

    def _request(self, **user):
        return SimpleNamespace(user=SimpleNamespace(**user))

    def test_admin_is_allowed(self):
        request = self._request(is_authenticated=True, is_admin=True)
        self.assertTrue(self.permission.has_permission(request, self.view))
        self.assertTrue(self.permission.has_object_permission(request, self.view, object()))

    def test_regular_user_is_denied(self):
        request = self._request(is_authenticated=True, is_admin=False)
        self.assertFalse(self.permission.has_permission(request, self.view))
        self.assertFalse(self.permission.has_object_permission(request, self.view, object()))

    def test_anonymous_is_denied(self):
        request = self._request(is_authenticated=False)
        self.assertFalse(self.permission.has_permission(request, self.view))

    def test_missing_user_is_denied(self):
        self.assertFalse(self.permission.has_permission(SimpleNamespace(user=None), self.view))
