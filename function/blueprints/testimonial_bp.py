# ============================================================================
# TESTIMONIAL BLUEPRINT
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Blueprint - Testimonials
# PURPOSE: Public testimonial listing and admin maintenance
# CREATED: 17 OCT 2026
# ============================================================================
"""
Testimonial Blueprint

- GET    /api/testimonials?limit&featured&locale - Public, cached 15 minutes
- POST   /api/testimonials - Create (Admin)
- PUT    /api/testimonials/{id} - Replace (Admin)
- DELETE /api/testimonials/{id} - Delete (Admin)
"""

import logging
from typing import Optional

import azure.functions as func

from core.errors import NotFoundError
from core.models import Testimonial
from function.auth.guard import authenticate_admin
from function.http import exception_response, json_response, read_json
from function.models.requests import TestimonialRequest
from function.models.responses import TestimonialListResponse
from function.repositories.testimonial_repo import TestimonialRepository

logger = logging.getLogger(__name__)
testimonial_bp = func.Blueprint()

DEFAULT_LIMIT = 5
MAX_LIMIT = 20
LIST_CACHE_CONTROL = "public, max-age=900"


def _parse_limit(value: Optional[str]) -> int:
    try:
        limit = int(value) if value is not None else DEFAULT_LIMIT
    except ValueError:
        return DEFAULT_LIMIT
    if limit < 1:
        return DEFAULT_LIMIT
    return min(limit, MAX_LIMIT)


def _parse_bool(value: Optional[str]) -> Optional[bool]:
    if value is None:
        return None
    lowered = value.strip().lower()
    if lowered in ("true", "1"):
        return True
    if lowered in ("false", "0"):
        return False
    return None


@testimonial_bp.route(route="testimonials", methods=["GET"])
def list_testimonials(req: func.HttpRequest) -> func.HttpResponse:
    """
    Newest testimonials.

    GET /api/testimonials
    Query params: limit (1-20, default 5), featured (true/false), locale
    """
    limit = _parse_limit(req.params.get("limit"))
    featured = _parse_bool(req.params.get("featured"))
    locale = req.params.get("locale") or None

    try:
        items, total = TestimonialRepository().list_testimonials(limit=limit, featured=featured, locale=locale)
        response = TestimonialListResponse(
            testimonials=[t.to_document() for t in items],
            total=total,
        )
        return json_response(response, headers={"Cache-Control": LIST_CACHE_CONTROL})
    except Exception as e:
        return exception_response(e, "list testimonials")


@testimonial_bp.route(route="testimonials", methods=["POST"])
def create_testimonial(req: func.HttpRequest) -> func.HttpResponse:
    user, error = authenticate_admin(req)
    if error:
        return error

    try:
        request = TestimonialRequest.model_validate(read_json(req))
        testimonial = Testimonial(**request.model_dump())
        created = TestimonialRepository().create(testimonial)
        logger.info(f"Admin {user.upn} created testimonial {created.id}")
        return json_response(created.to_document(), status_code=201)
    except Exception as e:
        return exception_response(e, "create testimonial")


@testimonial_bp.route(route="testimonials/{id}", methods=["PUT"])
def update_testimonial(req: func.HttpRequest) -> func.HttpResponse:
    """
    Replace a testimonial, keeping its id and createdAt.

    PUT /api/testimonials/{id}
    """
    user, error = authenticate_admin(req)
    if error:
        return error

    testimonial_id = req.route_params.get("id")
    try:
        request = TestimonialRequest.model_validate(read_json(req))
        repo = TestimonialRepository()
        existing = repo.find(testimonial_id)
        if existing is None:
            raise NotFoundError("Testimonial not found", f"No testimonial '{testimonial_id}'")

        updated = Testimonial(id=existing.id, created_at=existing.created_at, **request.model_dump())
        if updated.locale == existing.locale:
            saved = repo.replace(updated)
        else:
            # Locale is the partition key: move the document
            saved = repo.create(updated)
            repo.delete(existing.id, existing.locale)

        logger.info(f"Admin {user.upn} updated testimonial {testimonial_id}")
        return json_response(saved.to_document())
    except Exception as e:
        return exception_response(e, f"update testimonial {testimonial_id}")


@testimonial_bp.route(route="testimonials/{id}", methods=["DELETE"])
def delete_testimonial(req: func.HttpRequest) -> func.HttpResponse:
    user, error = authenticate_admin(req)
    if error:
        return error

    testimonial_id = req.route_params.get("id")
    try:
        repo = TestimonialRepository()
        existing = repo.find(testimonial_id)
        if existing is None or not repo.delete(existing.id, existing.locale):
            raise NotFoundError("Testimonial not found", f"No testimonial '{testimonial_id}'")

        logger.info(f"Admin {user.upn} deleted testimonial {testimonial_id}")
        return func.HttpResponse(status_code=204)
    except Exception as e:
        return exception_response(e, f"delete testimonial {testimonial_id}")
