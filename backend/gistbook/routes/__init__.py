"""
Gistbook Backend - API Routes Package
=====================================

Route Inventory:
    - snippets.py:  GET  /api/snippets
                    GET  /api/snippets/by-subject/{subject_name:path}
                    POST /api/snippets
                    GET  /api/snippets/{snippet_id}
    - subjects.py:  GET    /api/subjects
                    POST   /api/subjects
                    DELETE /api/subjects/{subject_id}
    - health.py:    GET  /health
    - pages.py:     GET  /   (browser page; assets under /static)

Routes are thin: pull data out of the request, call a service, pick the
status code. Errors are raised by the services and rendered by the global
exception handlers in main.py.
"""
