# Services package init
"""
Biodex Backend - Services Layer
================================

Service Inventory:
    - ProfileService:     list profiles
    - SpeciesService:     species rows (list, get, create, update, delete)
    - SpeciesEditor:      view/edit/confirm/cancel/delete form controller
    - NotificationQueue:  user-facing notifications and their flash storage
"""
