# ============================================================================
# DOMAIN REGISTRATION ROUTE TESTS
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Tests - Registration, admin and trigger functions
# PURPOSE: Verify HTTP status mapping and request wiring of the blueprints
# CREATED: 18 OCT 2026
# ============================================================================
"""
Domain Registration Route Tests

The service layer is patched where each blueprint imports it; these tests
cover auth, body parsing, status codes and response shapes.

Run with:
    pytest tests/test_domain_registration_routes.py -v
"""

from unittest.mock import MagicMock, patch

import azure.functions as func
import pytest

from core.contracts import DomainRegistrationStatus
from core.logging import get_current_context
from core.errors import ConflictError, ForbiddenError, NotFoundError, UpstreamError
from function.blueprints.admin_bp import (
    admin_complete_domain_registration,
    admin_config,
    admin_init_containers,
)
from function.blueprints.domain_registration_bp import (
    create_domain_registration,
    get_domain_registration,
    list_domain_registrations,
    update_domain_registration,
)
from function.blueprints.domain_trigger_bp import (
    domain_registration_front_door_trigger,
    google_domain_registration_trigger,
)
from function.services.domain_registration_service import NO_SUBSCRIPTION_MESSAGE, CompletionResult
from tests.helpers import ADMIN_UPN, USER_UPN, body_of, call, make_registration, make_request, registration_body

SERVICE = "function.blueprints.domain_registration_bp.DomainRegistrationService"
ADMIN_SERVICE = "function.blueprints.admin_bp.DomainRegistrationService"
TRIGGER_SERVICE = "function.blueprints.domain_trigger_bp.DomainRegistrationService"
CONTEXT = MagicMock(invocation_id="3f2b9c1e-inv")


class TestCreateRoute:

    def test_requires_auth(self):
        resp = call(create_domain_registration, make_request("POST", "/api/domain-registrations", body=registration_body()))
        assert resp.status_code == 401

    def test_created(self, user):
        registration = make_registration()
        with patch(SERVICE) as service:
            service.return_value.create.return_value = registration
            req = make_request("POST", "/api/domain-registrations", body=registration_body(), token=user)
            resp = call(create_domain_registration, req)

        assert resp.status_code == 201
        body = body_of(resp)
        assert body["id"] == registration.id
        assert body["status"] == "Pending"
        assert body["domain"] == {"topLevelDomain": "com", "secondLevelDomain": "janedoe"}
        upn, request = service.return_value.create.call_args.args
        assert upn == USER_UPN
        assert request.domain.second_level_domain == "janedoe"

    def test_invalid_json(self, user):
        req = make_request("POST", "/api/domain-registrations", body=b"{not json", token=user)
        resp = call(create_domain_registration, req)
        assert resp.status_code == 400
        assert body_of(resp)["error"] == "Invalid JSON in request body"

    def test_missing_fields(self, user):
        req = make_request("POST", "/api/domain-registrations", body={"domain": {"topLevelDomain": "com"}}, token=user)
        resp = call(create_domain_registration, req)
        assert resp.status_code == 400
        assert body_of(resp)["code"] == "VALIDATION_ERROR"

    def test_unexpected_error_is_500(self, user):
        with patch(SERVICE) as service:
            service.return_value.create.side_effect = RuntimeError("cosmos exploded")
            req = make_request("POST", "/api/domain-registrations", body=registration_body(), token=user)
            resp = call(create_domain_registration, req)
        assert resp.status_code == 500
        assert "cosmos" not in body_of(resp)["error"]


class TestReadRoutes:

    def test_list(self, user):
        with patch(SERVICE) as service:
            service.return_value.list_for_user.return_value = [make_registration(), make_registration()]
            resp = call(list_domain_registrations, make_request("GET", "/api/domain-registrations", token=user))
        assert resp.status_code == 200
        assert len(body_of(resp)) == 2

    def test_get_not_found(self, user):
        with patch(SERVICE) as service:
            service.return_value.get_for_user.side_effect = NotFoundError("Domain registration not found")
            req = make_request("GET", "/api/domain-registrations/x", route_params={"registrationId": "x"}, token=user)
            resp = call(get_domain_registration, req)
        assert resp.status_code == 404

    def test_get(self, user):
        registration = make_registration()
        with patch(SERVICE) as service:
            service.return_value.get_for_user.return_value = registration
            req = make_request(
                "GET", f"/api/domain-registrations/{registration.id}",
                route_params={"registrationId": registration.id}, token=user,
            )
            resp = call(get_domain_registration, req)
        assert body_of(resp)["contactInformation"]["firstName"] == "Jane"
        service.return_value.get_for_user.assert_called_once_with(USER_UPN, registration.id)


class TestUpdateRoute:

    def _put(self, token, body):
        return make_request(
            "PUT", "/api/domain-registrations/r1", body=body, route_params={"registrationId": "r1"}, token=token,
        )

    def test_forbidden_without_subscription(self, user):
        with patch(SERVICE) as service:
            service.return_value.update.side_effect = ForbiddenError(NO_SUBSCRIPTION_MESSAGE)
            resp = call(update_domain_registration, self._put(user, {"status": "Cancelled"}))
        assert resp.status_code == 403
        assert body_of(resp)["error"] == NO_SUBSCRIPTION_MESSAGE

    def test_updated(self, user):
        registration = make_registration(status=DomainRegistrationStatus.CANCELLED)
        with patch(SERVICE) as service:
            service.return_value.update.return_value = registration
            resp = call(update_domain_registration, self._put(user, {"status": "cancelled"}))
        assert resp.status_code == 200
        assert body_of(resp)["status"] == "Cancelled"
        request = service.return_value.update.call_args.args[2]
        assert request.status == DomainRegistrationStatus.CANCELLED

    def test_legacy_numeric_status(self, user):
        with patch(SERVICE) as service:
            service.return_value.update.return_value = make_registration()
            call(update_domain_registration, self._put(user, {"status": 4}))
        assert service.return_value.update.call_args.args[2].status == DomainRegistrationStatus.CANCELLED


class TestAdminRoutes:

    def _complete(self, token):
        return make_request(
            "POST", "/api/admin/domain-registrations/r1/complete", route_params={"registrationId": "r1"}, token=token,
        )

    def test_non_admin_forbidden(self, user):
        with patch(ADMIN_SERVICE) as service:
            resp = call(admin_complete_domain_registration, self._complete(user), CONTEXT)
        assert resp.status_code == 403
        service.assert_not_called()

    def test_complete(self, admin):
        registration = make_registration(status=DomainRegistrationStatus.IN_PROGRESS)
        result = CompletionResult(registration, whmcs_registered=True, dns_configured=False, front_door_configured=True)
        with patch(ADMIN_SERVICE) as service:
            service.return_value.complete_registration.return_value = result
            resp = call(admin_complete_domain_registration, self._complete(admin), CONTEXT)

        assert resp.status_code == 200
        body = body_of(resp)
        assert body["status"] == "InProgress"
        assert body["steps"] == {"whmcsRegistration": True, "dnsConfiguration": False, "frontDoor": True}

    @pytest.mark.parametrize("error,status", [
        (NotFoundError("Domain registration not found"), 404),
        (ConflictError("Domain registration is already Completed"), 409),
        (UpstreamError("WHMCS error"), 502),
    ])
    def test_complete_errors(self, admin, error, status):
        with patch(ADMIN_SERVICE) as service:
            service.return_value.complete_registration.side_effect = error
            resp = call(admin_complete_domain_registration, self._complete(admin), CONTEXT)
        assert resp.status_code == status

    def _wired_service(self, repo):
        module = "function.services.domain_registration_service"
        patches = [
            patch(f"{module}.DomainRegistrationRepository", return_value=repo),
            patch(f"{module}.WhmcsClient"),
            patch(f"{module}.DnsZoneClient"),
            patch(f"{module}.FrontDoorClient"),
        ]
        for p in patches:
            p.start()
        return patches

    def test_complete_lookup_error_is_500(self, admin):
        repo = MagicMock()
        repo.find_by_id.side_effect = RuntimeError("cosmos unavailable")
        patches = self._wired_service(repo)
        try:
            resp = call(admin_complete_domain_registration, self._complete(admin), CONTEXT)
        finally:
            for p in patches:
                p.stop()

        assert resp.status_code == 500
        assert body_of(resp)["error"] == "An unexpected error occurred"

    def test_complete_save_failure_is_500_with_steps(self, admin):
        repo = MagicMock()
        repo.find_by_id.return_value = make_registration()
        repo.replace.side_effect = RuntimeError("precondition failed")
        patches = self._wired_service(repo)
        try:
            resp = call(admin_complete_domain_registration, self._complete(admin), CONTEXT)
        finally:
            for p in patches:
                p.stop()

        assert resp.status_code == 500
        body = body_of(resp)
        assert body["error"] == "Failed to save domain registration"
        assert body["details"].startswith("Workflow steps: whmcs_registration=")
        assert body["code"] == "INTERNAL_ERROR"

    def test_complete_runs_under_invocation_id(self, admin):
        seen = {}

        def complete(registration_id):
            seen.update(get_current_context().to_dict())
            raise NotFoundError("Domain registration not found")

        with patch(ADMIN_SERVICE) as service:
            service.return_value.complete_registration.side_effect = complete
            call(admin_complete_domain_registration, self._complete(admin), CONTEXT)

        assert seen["invocation_id"] == "3f2b9c1e-inv"
        assert seen["upn"] == ADMIN_UPN

    def test_init_containers(self, admin):
        result = MagicMock(success=True)
        result.to_dict.return_value = {"success": True, "created": ["Leads"]}
        with patch("function.blueprints.admin_bp.ContainerInitializer") as initializer:
            initializer.return_value.initialize_all.return_value = result
            resp = call(admin_init_containers, make_request("POST", "/api/admin/containers/init", token=admin))
        assert resp.status_code == 200
        assert body_of(resp)["created"] == ["Leads"]

    def test_init_containers_failure(self, admin):
        result = MagicMock(success=False)
        result.to_dict.return_value = {"success": False, "errors": ["Leads: forbidden"]}
        with patch("function.blueprints.admin_bp.ContainerInitializer") as initializer:
            initializer.return_value.initialize_all.return_value = result
            resp = call(admin_init_containers, make_request("POST", "/api/admin/containers/init", token=admin))
        assert resp.status_code == 500

    def test_config_hides_secrets(self, admin, monkeypatch):
        monkeypatch.setenv("STRIPE_API_KEY", "sk_live_secret")
        resp = call(admin_config, make_request("GET", "/api/admin/config", token=admin))
        assert resp.status_code == 200
        text = resp.get_body().decode()
        assert "sk_live_secret" not in text
        assert body_of(resp)["config"]["integrations"]["stripe"] is True


class TestTriggers:

    def _documents(self, *registrations):
        return func.DocumentList([func.Document.from_dict(r.to_document()) for r in registrations])

    def test_front_door_trigger(self):
        registration = make_registration()
        with patch(TRIGGER_SERVICE) as service:
            service.return_value.provision_front_door.return_value = 1
            domain_registration_front_door_trigger.build().get_user_function()(self._documents(registration), CONTEXT)

        docs = service.return_value.provision_front_door.call_args.args[0]
        assert docs[0]["id"] == registration.id
        assert docs[0]["domain"]["secondLevelDomain"] == "janedoe"

    def test_google_trigger(self):
        with patch(TRIGGER_SERVICE) as service:
            service.return_value.provision_google_domains.return_value = 0
            google_domain_registration_trigger.build().get_user_function()(self._documents(make_registration()), CONTEXT)
        service.return_value.provision_google_domains.assert_called_once()

    def test_empty_batch_is_ignored(self):
        with patch(TRIGGER_SERVICE) as service:
            domain_registration_front_door_trigger.build().get_user_function()(func.DocumentList([]), CONTEXT)
        service.assert_not_called()

    def test_trigger_runs_under_invocation_id(self):
        seen = []

        def provision(documents):
            seen.append(get_current_context().invocation_id)
            return 0

        context = MagicMock(invocation_id="9a0d-google")
        with patch(TRIGGER_SERVICE) as service:
            service.return_value.provision_google_domains.side_effect = provision
            google_domain_registration_trigger.build().get_user_function()(self._documents(make_registration()), context)

        assert seen == ["9a0d-google"]
        assert get_current_context().invocation_id is None
