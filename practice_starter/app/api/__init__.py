"""REST API of the application.

Routers live in ``routes``; the code they delegate to lives in
``routes.route_logic`` so it can be tested without HTTP.
"""
