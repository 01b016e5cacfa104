"""
Notes API: Routes Package
==========================

Route Inventory:
    - notes.py:   GET    /api/notes
                  POST   /api/notes/add-note
                  PUT    /api/notes/update-note?id=<id>
                  DELETE /api/notes/delete-note?id=<id>
    - health.py:  GET    /health

Routes stay thin: pull fields out of the request, call NoteService, return
its Envelope.
"""
