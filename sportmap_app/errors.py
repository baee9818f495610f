# sportmap_app/errors.py
# -*- coding: utf-8 -*-
from __future__ import annotations

from flask import jsonify, current_app
from werkzeug.exceptions import HTTPException


class ErrorCodes:
    BILLING_NOT_FOUND = "BILLING_NOT_FOUND"
    PAYMENT_NOT_FOUND = "PAYMENT_NOT_FOUND"
    NOTIFICATION_NOT_FOUND = "NOTIFICATION_NOT_FOUND"
    SUBSCRIPTION_NOT_FOUND = "SUBSCRIPTION_NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"
    UNAUTHENTICATED = "UNAUTHENTICATED"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    PAYMENT_FAILED = "PAYMENT_FAILED"
    WEBHOOK_FAILED = "WEBHOOK_FAILED"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


class ApiMessages:
    """Textos exibidos ao cliente (title/message)."""
    class Auth:
        InvalidCredentials = ("Credenciais Inválidas", "Email ou senha incorretos")
        LoginRequired = ("Não Autenticado", "Faça login para acessar.")
        Forbidden = ("Acesso negado", "Acesso restrito a proprietários de quadra.")

    class Billing:
        NotFound = ("Cobrança não encontrada", "A cobrança especificada não foi encontrada")
        Forbidden = ("Acesso negado", "Você não tem permissão para atualizar esta cobrança")
        InvoicesForbidden = ("Acesso negado", "Você não tem permissão para visualizar as faturas desta cobrança")

    class Payment:
        Failed = ("Falha no Pagamento", "Não foi possível processar o pagamento")
        WebhookFailed = ("Falha no Webhook", "Erro ao processar webhook do Stripe")

    class Subscription:
        NotFound = ("Assinatura não encontrada", "Usuário não possui uma assinatura ativa")

    class Notification:
        NotFound = ("Notificação não encontrada", "A notificação solicitada não foi encontrada")

    class Generic:
        InternalError = ("Erro Interno", "Ocorreu um erro interno no servidor")
        RequestError = ("Erro na Requisição", "A requisição contém dados inválidos")


class ApiError(Exception):
    """Erro uniforme exposto ao cliente: title, message e code estável."""
    status_code = 400

    def __init__(self, title: str, message: str, code: str, status_code: int | None = None):
        super().__init__(message)
        self.title = title
        self.message = message
        self.code = code
        if status_code is not None:
            self.status_code = status_code

    @classmethod
    def of(cls, pair: tuple[str, str], code: str, status_code: int | None = None) -> "ApiError":
        title, message = pair
        return cls(title, message, code, status_code)

    def to_dict(self) -> dict:
        return {"title": self.title, "message": self.message, "code": self.code}


class NotFoundError(ApiError):
    status_code = 404


class ForbiddenError(ApiError):
    status_code = 403


def payment_failed() -> ApiError:
    return ApiError.of(ApiMessages.Payment.Failed, ErrorCodes.PAYMENT_FAILED, 400)


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def _api_error(err: ApiError):
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(HTTPException)
    def _http_error(err: HTTPException):
        title, _ = ApiMessages.Generic.RequestError
        return jsonify(title=title, message=err.description, code=f"HTTP_{err.code}"), err.code

    @app.errorhandler(Exception)
    def _unexpected(err: Exception):
        current_app.logger.exception("Erro não tratado: %s", err)
        title, message = ApiMessages.Generic.InternalError
        return jsonify(title=title, message=message, code=ErrorCodes.INTERNAL_SERVER_ERROR), 500
