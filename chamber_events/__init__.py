"""chamber_events - recurring event occurrence engine for a chamber of commerce site.

Expands CMS event records (one-off and weekly/monthly recurring) into concrete
dated occurrences, classifies them for the events page and selects them for
the newsletter.

Keep this module import-light: the public API lives in the ``calendar``,
``domain`` and ``core`` subpackages.
"""

__version__ = "1.0.0"

__all__ = ["__version__"]
