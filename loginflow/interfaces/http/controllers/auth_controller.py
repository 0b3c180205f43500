# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus
from typing import Any

from flask import Blueprint, Response, jsonify, request
from pydantic import ValidationError

from loginflow.application.use_cases.users.login_user import (
    LoginAccepted,
    LoginRejected,
    LoginUserUseCase,
)
from loginflow.application.use_cases.users.logout_user import LogoutUserUseCase
from loginflow.application.use_cases.users.require_anonymous import (
    GuardDecision,
    RequireAnonymousUseCase,
)
from loginflow.domain.users.entities import Credential
from loginflow.infrastructure.audit import AuditAction, audit_log
from loginflow.interfaces.http.dto.auth import LoginErrorDTO, LoginRequestDTO, LoginSubmissionDTO
from loginflow.interfaces.http.redirects import safe_redirect
from loginflow.shared.errors.validation import raise_validation_error
from loginflow.shared.logging import logger


def _get_client_ip() -> str | None:
    ip_address = request.headers.get("X-Forwarded-For", request.remote_addr)
    if ip_address and "," in ip_address:
        ip_address = ip_address.split(",")[0].strip()
    return ip_address


def _submitted_fields() -> dict[str, Any]:
    body = request.get_json(silent=True)
    if isinstance(body, dict):
        return body
    return request.form.to_dict()


def _redirect(location: str, set_cookie: str | None = None) -> Response:
    response = Response(status=HTTPStatus.FOUND)
    response.headers["Location"] = location
    if set_cookie:
        response.headers.add("Set-Cookie", set_cookie)
    return response


class AuthController:
    def __init__(
        self,
        *,
        login_use_case: LoginUserUseCase,
        logout_use_case: LogoutUserUseCase,
        require_anonymous: RequireAnonymousUseCase,
        home_route: str = "/",
    ) -> None:
        self._login_use_case = login_use_case
        self._logout_use_case = logout_use_case
        self._require_anonymous = require_anonymous
        self._home_route = home_route

    def _authenticated_redirect(self) -> Response | None:
        decision = self._require_anonymous.execute(request.headers.get("Cookie"))
        if decision is GuardDecision.REDIRECT:
            logger.debug(f"auth.guard: live session on {request.path}, redirecting")
            return _redirect(self._home_route)
        return None

    def login_page(self) -> Response | tuple[Response, int]:
        redirect_response = self._authenticated_redirect()
        if redirect_response is not None:
            return redirect_response
        return jsonify({}), HTTPStatus.OK

    def login(self) -> Response | tuple[Response, int]:
        redirect_response = self._authenticated_redirect()
        if redirect_response is not None:
            return redirect_response

        try:
            dto = LoginRequestDTO.model_validate(_submitted_fields())
        except ValidationError as exc:
            raise_validation_error(exc)

        ip_address = _get_client_ip()
        location = safe_redirect(dto.redirect_to, self._home_route)
        credential = Credential(username=dto.username, password=dto.password)
        result = self._login_use_case.execute(credential, remember_me=dto.remember)

        if isinstance(result, LoginRejected):
            audit_log(
                AuditAction.LOGIN_FAILED,
                ip_address=ip_address,
                details={"username": dto.username, "error": result.error.code},
                success=False,
            )
            payload = LoginErrorDTO(
                submission=LoginSubmissionDTO(
                    payload=dto.echo(),
                    error={"": [result.error.message]},
                )
            )
            return jsonify(payload.model_dump(by_alias=True)), HTTPStatus.BAD_REQUEST

        assert isinstance(result, LoginAccepted)
        audit_log(
            AuditAction.LOGIN_SUCCESS,
            user_id=result.session.user_id,
            ip_address=ip_address,
            details={"username": dto.username, "remember_me": dto.remember},
            success=True,
        )
        return _redirect(location, result.set_cookie)

    def logout(self) -> Response:
        set_cookie = self._logout_use_case.execute(request.headers.get("Cookie"))
        audit_log(AuditAction.LOGOUT, ip_address=_get_client_ip(), success=True)
        return _redirect(self._home_route, set_cookie)

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("auth", __name__)
        bp.add_url_rule("/login", view_func=self.login_page, methods=["GET"])
        bp.add_url_rule("/login", view_func=self.login, methods=["POST"])
        bp.add_url_rule("/logout", view_func=self.logout, methods=["POST"])
        return bp
