"""
Ошибки предметной области.
API превращает их в HTTP-ответы, клиент поднимает их из HTTP-ответов.
"""


class PosError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(PosError):
    status_code = 400


class AuthError(PosError):
    status_code = 401


class PermissionDeniedError(PosError):
    status_code = 403


class NotFoundError(PosError):
    status_code = 404


class TransientNetworkError(PosError):
    """Сервер недоступен. Повторять действие должен оператор."""
    status_code = None
