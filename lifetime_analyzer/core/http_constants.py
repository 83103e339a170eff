"""Constantes HTTP pour éviter les valeurs magiques dans le code.

Codes de statut utilisés par les routes et les tests de l'API.
"""

HTTP_OK = 200
HTTP_CREATED = 201
HTTP_NOT_FOUND = 404
HTTP_UNPROCESSABLE_ENTITY = 422
HTTP_BAD_GATEWAY = 502
HTTP_SERVICE_UNAVAILABLE = 503
