# Services package init
"""
PodReview Backend — Services Layer
===================================

What:  Business rules between the routes (HTTP) and the database.
How:   Services take an `AsyncSession` plus validated request schemas, apply
       ownership and uniqueness rules, and return response schemas. They
       never commit; the request's session dependency does.

Service Inventory:
    - RecordMutator (mutation): fetch → ownership check → allowlisted patch
      → persist, shared by every update and delete path
    - ReviewService: review CRUD, one review per user per podcast/episode
    - PodcastService: podcast catalogue, globally unique names
    - UserService: signup, login, the caller's own profile
"""
