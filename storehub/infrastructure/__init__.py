"""Infrastructure layer.

Settings, database access, logging and the external collaborators
(auth provider, error observation).
"""
