"""
Exceptions raised by django-weblog-engine.

Validation problems use Django's own ``ValidationError`` so forms and the
admin display them; this module only adds the storage failure kind.
"""


class StorageError(Exception):
    """
    The persistence backend could not complete an operation.

    Raised for unavailable backends, write conflicts and missing documents on
    update. The engine never retries; that policy belongs to the backend.
    """

    def __init__(self, message, *, operation=None):
        super().__init__(message)
        self.operation = operation
