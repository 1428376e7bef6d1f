# Routes package init
"""
CityInfo API: Routes Package
============================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - cities.py:              GET /api/cities
                              GET /api/cities/{id}?includePointsOfInterest=
    - points_of_interest.py:  GET/POST        /api/cities/{id}/pointsofinterest
                              GET/PUT/PATCH/DELETE
                                  /api/cities/{id}/pointsofinterest/{poiId}
    - health.py:              GET /health

Routes handle HTTP details (status codes, headers) and delegate validation,
mapping and persistence to the services layer.
"""
