# Services package init
"""
Scriblink Backend — Services Layer
====================================

What:  Business logic between routes (HTTP) and the database.

Service Inventory:
    - FolderService:      folder forest (create, move, cascade delete, traversal)
    - NoteService:        owner-scoped note CRUD
    - TagService:         user labels on items
    - SummaryService:     stored summaries and validated AI generation
    - SummaryValidator:   length / meta-language / relevance checks
    - SummaryGenerator:   abstract text-generation interface
    - GeminiSummarizer:   SummaryGenerator backed by Google Gemini
    - AuthService:        bcrypt username/password accounts
    - WorkspaceService:   request flows composing the services above

Each service module ends with a module-level singleton used by the routes.
"""
