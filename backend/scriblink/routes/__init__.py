# Routes package init
"""
Scriblink Backend — API Routes Package
========================================

What:  HTTP route handlers that accept requests and return responses.
How:   One module per resource; handlers delegate to WorkspaceService.

Route Inventory:
    - auth.py:       POST /api/auth/register, POST /api/auth/login
    - folders.py:    /api/folders (root, list, create, get, parent, move, items, delete)
    - notes.py:      /api/notes (create, list, get, title, content, move, delete)
    - tags.py:       /api/tags (add, list, get, remove, tags of a note)
    - summaries.py:  /api/summaries (validate, get, set, generate, delete)
    - health.py:     GET /health

Routes are THIN: they read the request, call a service and shape the
response. Business rules live in services so they can be tested without HTTP.
Requests identify their user through the X-User-ID header (deps.py).
"""
