"""Common literal values used across folio_pages.

These constants keep reserved fragment names and layout defaults centralized
so the renderer, the site builder, and tests can import the same values
without drifting. Intended for internal use within the folio_pages package.

Examples
--------
>>> from folio_pages import _constants
>>> "layout-nav".startswith(_constants.TRANSIENT_FRAGMENT_PREFIX)
True
>>> _constants.DEFAULT_LAYOUT
'default'
"""

DEFAULT_LAYOUT = "default"
BODY_FRAGMENT = "body"
TRANSIENT_FRAGMENT_PREFIX = "layout-"

INLINE_MARKERS = ("{{#*inline", "{{~#*inline")
COMMENT_OPEN = "{{!--"
COMMENT_CLOSE = "--}}"

ERROR_BODY_TEMPLATE = "Template could not be parsed <br>\n<pre>{{ error }}</pre>"
ERROR_PAGE_TITLE = "Page rendering error"
