"""
Notes API: Services Layer
==========================

Service Inventory:
    - NoteStore:   persistence handle over the `notes` table (one per process)
    - NoteService: stateless envelope handlers for list/add/update/delete
"""
