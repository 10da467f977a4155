# Routes package init
"""
Biodex Backend - Routes Package
================================

Route Inventory:
    - pages.py:          GET  /, /users, /species; POST /species (create)
    - species_pages.py:  /species/{id} detail page and editor actions
    - profiles.py:       GET  /api/profiles
    - species.py:        /api/species CRUD
    - health.py:         GET  /health

Routes stay thin: read the request, call a service or the species editor,
pick the response. Business rules live in services.
"""
