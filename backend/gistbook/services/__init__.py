"""
Gistbook Backend - Services Layer
=================================

What:  Business rules between routes (HTTP) and the RecordStore.
How:   Services are stateless singletons. Every method receives the store
       it should use, so tests can pass a real store on a temp file or an
       AsyncMock.

Service Inventory:
    - SnippetService: list / list-by-subject / create / get snippets
    - SubjectService: list / create (duplicate check) / delete (guarded)
"""
