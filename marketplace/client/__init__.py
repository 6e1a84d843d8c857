"""
Client side of the marketplace: HTTP client, local pick bookmarks, chat polling
and the list + filter helpers shared with the server views.
"""
