"""Listing, newsletter and eligibility logic built on the occurrence engine."""

from .eligibility import filter_eligible, is_eligible
from .listing import build_event_listing
from .newsletter_digest import NewsletterDigest, build_newsletter_digest
from .window_classifier import ClassifiedOccurrences, classify

__all__ = [
    "ClassifiedOccurrences",
    "NewsletterDigest",
    "build_event_listing",
    "build_newsletter_digest",
    "classify",
    "filter_eligible",
    "is_eligible",
]
