"""
T-Image API: API Routes Package
==================================

Route Inventory:
    - auth.py:    POST  /api/auth/signup
                  POST  /api/auth/login
                  PATCH /api/auth/reset-password   (Basic auth)
    - images.py:  POST   /api/images               (Basic auth)
                  GET    /api/images
                  GET    /api/images/{image_id}
                  DELETE /api/images/{image_id}    (Basic auth, owner only)
    - health.py:  GET  /health

Routes stay thin: parse the request, call a service, pick the status code.
"""
