"""
T-Image API: Services Layer
==============================

What:  Business logic between routes (HTTP) and the database.
How:   Services receive an AsyncSession per call and return response
       schemas or raise exceptions from timage.exceptions.

Service Inventory:
    - UserService:  signup, login, password reset, credential lookup
    - ImageService: upload, list, get by id, owner-only delete
"""
