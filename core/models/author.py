# ============================================================================
# AUTHOR MODEL
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Domain model - Author one-page sites
# PURPOSE: Author profile content served per domain and locale
# LAST_REVIEWED: 16 OCT 2026
# ============================================================================
"""
Author and Book Models

An author site is addressed by its domain (second-level + top-level) and
localized by language/region. Several Author documents can share a domain,
one per locale; isDefault marks the fallback.
"""

from typing import ClassVar, Optional

from core.models.base import CosmosDocument


class Author(CosmosDocument):
    """
    Localized author profile.

    Container: Authors, partition key /id
    """

    __container__: ClassVar[str] = "Authors"
    __partition_key__: ClassVar[str] = "id"

    top_level_domain: str
    second_level_domain: str
    language_name: str = "en"
    region_name: Optional[str] = None
    author_name: str = ""
    welcome_text: str = ""
    about_text: str = ""
    head_shot_url: Optional[str] = None
    copyright_text: str = ""
    email_address: str = ""
    is_default: bool = False


class Book(CosmosDocument):
    """
    Book listed on an author site.

    Container: Books, partition key /authorId
    """

    __container__: ClassVar[str] = "Books"
    __partition_key__: ClassVar[str] = "author_id"

    author_id: str
    title: str
    description: str = ""
    url: Optional[str] = None
    cover: Optional[str] = None


__all__ = ["Author", "Book"]
