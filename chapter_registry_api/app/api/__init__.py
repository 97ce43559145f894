"""
API package.

``router`` aggregates the per-domain routers defined in ``endpoints``;
``dependencies`` builds services from the application's database and
``responses`` holds the JSON envelope helpers the endpoints share.
"""
