"""
config_console – headless presentation tier for the config server.

Holds the page state and interaction rules of the console (browser, user
administration, inline editing) and talks to the REST API through
:class:`~config_console.api.ConfigServerClient`.
"""
