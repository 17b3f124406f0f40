# ============================================================================
# AUTHOR BLUEPRINT
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Blueprint - Author sites
# PURPOSE: Localized author profiles and sitemaps for a custom domain
# CREATED: 17 OCT 2026
# ============================================================================
"""
Author Blueprint

- GET /api/authors/{secondLevelDomain}/{topLevelDomain} - Author profiles for a domain (anonymous)
- GET /api/sitemap.xml/{topLevelDomain}/{secondLevelDomain} - Sitemap for a registered domain (anonymous)
"""

import logging
from datetime import datetime
from xml.etree import ElementTree

import azure.functions as func

from function.http import error_response, exception_response, json_response
from function.repositories.author_repo import AuthorRepository
from function.repositories.domain_registration_repo import DomainRegistrationRepository

logger = logging.getLogger(__name__)
author_bp = func.Blueprint()

SITEMAP_NAMESPACE = "http://www.sitemaps.org/schemas/sitemap/0.9"


@author_bp.route(route="authors/{secondLevelDomain}/{topLevelDomain}", methods=["GET"])
def get_authors_by_domain(req: func.HttpRequest) -> func.HttpResponse:
    second_level_domain = req.route_params.get("secondLevelDomain")
    top_level_domain = req.route_params.get("topLevelDomain")

    try:
        authors = AuthorRepository().list_by_domain(top_level_domain, second_level_domain)
    except Exception as e:
        return exception_response(e, f"authors for {second_level_domain}.{top_level_domain}")

    if not authors:
        logger.info(f"No authors for {second_level_domain}.{top_level_domain}")
        return error_response("Domain not found", 404)
    return json_response([a.to_document() for a in authors])


def build_sitemap(site_url: str, last_modified: datetime) -> str:
    """Single-URL sitemap document for an author site."""
    ElementTree.register_namespace("", SITEMAP_NAMESPACE)
    urlset = ElementTree.Element(f"{{{SITEMAP_NAMESPACE}}}urlset")
    url = ElementTree.SubElement(urlset, f"{{{SITEMAP_NAMESPACE}}}url")
    for tag, text in (
        ("loc", site_url),
        ("lastmod", last_modified.strftime("%Y-%m-%d")),
        ("changefreq", "weekly"),
        ("priority", "1.0"),
    ):
        ElementTree.SubElement(url, f"{{{SITEMAP_NAMESPACE}}}{tag}").text = text
    body = ElementTree.tostring(urlset, encoding="unicode")
    return f'<?xml version="1.0" encoding="UTF-8"?>\n{body}'


@author_bp.route(route="sitemap.xml/{topLevelDomain}/{secondLevelDomain}", methods=["GET"])
def get_sitemap(req: func.HttpRequest) -> func.HttpResponse:
    top_level_domain = req.route_params.get("topLevelDomain")
    second_level_domain = req.route_params.get("secondLevelDomain")
    domain_name = f"{second_level_domain}.{top_level_domain}"

    try:
        registration = DomainRegistrationRepository().find_by_domain(top_level_domain, second_level_domain)
    except Exception as e:
        return exception_response(e, f"sitemap for {domain_name}")

    if registration is None:
        logger.warning(f"No domain registration for {domain_name}, no sitemap")
        return error_response(f"Domain registration not found for {domain_name}", 404)

    logger.info(f"Serving sitemap for {domain_name}")
    return func.HttpResponse(
        build_sitemap(f"https://{domain_name}", registration.last_updated_at or registration.created_at),
        status_code=200,
        mimetype="application/xml",
        charset="utf-8",
    )

