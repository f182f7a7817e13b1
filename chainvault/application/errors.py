"""
Service error taxonomy

API-слой сопоставляет классы ошибок HTTP-статусам (см. chainvault/api/responses.py).
"""
from chainvault.domain.validation import Invalid


class ServiceError(ValueError):
    """Базовая ошибка сервисного слоя"""
    pass


class ValidationFailed(ServiceError):
    """Ошибки полей: все сообщения одной строкой через ", " """

    def __init__(self, result: Invalid, prefix: str = "Validation failed"):
        self.result = result
        message = f"{prefix}: {result.message}" if prefix else result.message
        super().__init__(message)


class BusinessRuleError(ServiceError):
    """Нарушение бизнес-правила (дубликат, сумма больше цели, есть подцели)"""
    pass


class InvalidIdError(ServiceError):
    """Идентификатор не прошёл проверку формы"""
    pass


class ReferenceNotFoundError(ServiceError):
    """Запись, на которую ссылается payload (user, parent goal), не найдена"""
    pass


class NotFoundError(ServiceError):
    """Запись, запрошенная по id, не найдена"""
    pass


class AuthenticationError(ServiceError):
    pass
