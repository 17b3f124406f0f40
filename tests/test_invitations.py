# ============================================================================
# AUTHOR INVITATION TESTS
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Tests - Author onboarding invitations
# PURPOSE: Verify invitation documents, input rules and the admin route
# CREATED: 19 OCT 2026
# ============================================================================
"""
Author Invitation Tests

Run with:
    pytest tests/test_invitations.py -v
"""

import logging
from datetime import timedelta
from unittest.mock import MagicMock, patch

import pytest

from core.contracts import InvitationStatus
from core.errors import ValidationError
from core.models import INVITATION_TTL_DAYS, AuthorInvitation
from function.blueprints.admin_bp import create_author_invitation
from function.models.requests import CreateAuthorInvitationRequest
from function.repositories.author_invitation_repo import AuthorInvitationRepository
from function.services.invitation_service import InvitationService, is_valid_invitation_domain
from tests.helpers import ADMIN_UPN, body_of, call, make_request

INVITE_REPO = "function.services.invitation_service.AuthorInvitationRepository"


def _repo(existing=None):
    repo = MagicMock()
    repo.get_by_email.return_value = existing
    repo.create.side_effect = lambda invitation: invitation
    return repo


def _request(**values):
    return CreateAuthorInvitationRequest.model_validate(values)


# ============================================================================
# MODEL & REPOSITORY
# ============================================================================

class TestAuthorInvitationModel:

    def test_document_shape(self):
        invitation = AuthorInvitation(email_address="author@example.com", domain_names=["janedoe.com", "jd.io"])
        doc = invitation.to_document()

        assert doc["emailAddress"] == "author@example.com"
        assert doc["domainName"] == "janedoe.com"
        assert doc["domainNames"] == ["janedoe.com", "jd.io"]
        assert doc["status"] == "Pending"
        assert abs(invitation.expires_at - invitation.created_at - timedelta(days=INVITATION_TTL_DAYS)) < timedelta(seconds=1)
        assert AuthorInvitation.partition_key_path() == "/emailAddress"

    def test_single_domain_document_still_reads(self):
        invitation = AuthorInvitation.from_document({
            "id": "inv-1",
            "emailAddress": "author@example.com",
            "domainName": "janedoe.com",
            "status": "Accepted",
            "createdAt": "2026-01-01T00:00:00Z",
            "expiresAt": "2026-01-31T00:00:00Z",
            "_etag": "x",
        })
        assert invitation.domain_names == ["janedoe.com"]
        assert invitation.status == InvitationStatus.ACCEPTED
        assert invitation.is_expired() is True


class TestAuthorInvitationRepository:

    def test_get_by_email_reads_one_partition_newest_first(self):
        container = MagicMock()
        container.query_items.return_value = iter([])
        assert AuthorInvitationRepository(container).get_by_email("author@example.com") is None

        kwargs = container.query_items.call_args.kwargs
        assert kwargs["partition_key"] == "author@example.com"
        assert "ORDER BY c.createdAt DESC" in kwargs["query"]

    def test_list_pending(self):
        container = MagicMock()
        container.query_items.return_value = iter([])
        AuthorInvitationRepository(container).list_pending()
        kwargs = container.query_items.call_args.kwargs
        assert kwargs["parameters"] == [{"name": "@status", "value": "Pending"}]
        assert kwargs["enable_cross_partition_query"] is True


# ============================================================================
# SERVICE
# ============================================================================

class TestInvitationDomains:

    @pytest.mark.parametrize("name,expected", [
        ("janedoe.com", True),
        ("books.janedoe.co.uk", True),
        ("localhost", False),
        ("jane doe.com", False),
        ("-jane.com", False),
        ("jane..com", False),
        ("janedoe.c0m", False),
        ("janedoe.com\n", False),
        ("a" * 64 + ".com", False),
    ])
    def test_format(self, name, expected):
        assert is_valid_invitation_domain(name) is expected


class TestInvitationService:

    def test_create_normalizes_and_merges_domains(self):
        repo = _repo()
        request = _request(
            emailAddress=" Author@Example.com ",
            domainName="JaneDoe.com",
            domainNames=["janedoe.com", "jd.io", " "],
            notes="Met at the book fair",
        )

        response = InvitationService(repo).create(request, invited_by=ADMIN_UPN)

        stored = repo.create.call_args.args[0]
        assert stored.email_address == "author@example.com"
        assert stored.domain_names == ["janedoe.com", "jd.io"]
        assert stored.invited_by == ADMIN_UPN
        assert response.domain_name == "janedoe.com"
        assert response.status == InvitationStatus.PENDING
        assert response.email_sent is False
        repo.get_by_email.assert_called_once_with("author@example.com")

    @pytest.mark.parametrize("values,message", [
        ({"domainName": "janedoe.com"}, "Email address is required"),
        ({"emailAddress": "  ", "domainName": "janedoe.com"}, "Email address is required"),
        ({"emailAddress": "not-an-email", "domainName": "janedoe.com"}, "Invalid email address format: not-an-email"),
        ({"emailAddress": "author@example.com"}, "Domain name is required"),
        ({"emailAddress": "author@example.com", "domainNames": []}, "Domain name is required"),
        ({"emailAddress": "author@example.com", "domainName": "nodot"}, "Invalid domain name format: nodot"),
    ])
    def test_rejected(self, values, message):
        repo = _repo()
        with pytest.raises(ValidationError) as exc:
            InvitationService(repo).create(_request(**values))
        assert exc.value.message == message
        repo.create.assert_not_called()

    def test_every_bad_domain_listed(self):
        with pytest.raises(ValidationError) as exc:
            InvitationService(_repo()).create(_request(emailAddress="a@example.com", domainNames=["x", "ok.com", "y"]))
        assert exc.value.errors == ["Invalid domain name format: x", "Invalid domain name format: y"]

    def test_reinvite_creates_another(self, caplog):
        previous = AuthorInvitation(email_address="author@example.com", domain_names=["old.com"])
        repo = _repo(existing=previous)

        with caplog.at_level(logging.WARNING):
            response = InvitationService(repo).create(_request(emailAddress="author@example.com", domainName="new.com"))

        assert response.id != previous.id
        repo.create.assert_called_once()
        assert any("already exists" in r.getMessage() for r in caplog.records)


# ============================================================================
# ROUTE
# ============================================================================

class TestInvitationRoute:

    def _post(self, body, token=None):
        return make_request("POST", "/api/author-invitations", body=body, token=token)

    def test_created(self, admin):
        repo = _repo()
        with patch(INVITE_REPO, return_value=repo):
            resp = call(create_author_invitation, self._post(
                {"emailAddress": "author@example.com", "domainName": "janedoe.com", "notes": "hi"}, admin,
            ))

        assert resp.status_code == 201
        body = body_of(resp)
        assert body["emailAddress"] == "author@example.com"
        assert body["domainNames"] == ["janedoe.com"]
        assert body["status"] == "Pending"
        assert body["emailSent"] is False
        assert {"id", "createdAt", "expiresAt"} <= body.keys()
        assert repo.create.call_args.args[0].invited_by == ADMIN_UPN

    def test_invalid_domain_is_400(self, admin):
        with patch(INVITE_REPO, return_value=_repo()):
            resp = call(create_author_invitation, self._post(
                {"emailAddress": "author@example.com", "domainName": "jane doe.com"}, admin,
            ))
        assert resp.status_code == 400
        assert body_of(resp)["error"] == "Invalid domain name format: jane doe.com"

    def test_non_admin_forbidden(self, user):
        with patch(INVITE_REPO) as repo_cls:
            resp = call(create_author_invitation, self._post({"emailAddress": "a@example.com"}, user))
        assert resp.status_code == 403
        repo_cls.assert_not_called()

    def test_anonymous_rejected(self):
        resp = call(create_author_invitation, self._post({"emailAddress": "a@example.com"}))
        assert resp.status_code == 401

    def test_store_failure_is_500(self, admin):
        repo = _repo()
        repo.create.side_effect = RuntimeError("cosmos down")
        with patch(INVITE_REPO, return_value=repo):
            resp = call(create_author_invitation, self._post(
                {"emailAddress": "author@example.com", "domainName": "janedoe.com"}, admin,
            ))
        assert resp.status_code == 500
        assert body_of(resp)["error"] == "An unexpected error occurred"
