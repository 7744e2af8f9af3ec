# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, jsonify

from postboard.application.use_cases.users import GetUserUseCase
from postboard.interfaces.http.dto.auth import user_payload
from postboard.utils.asyncio_utils import run_async


class UsersController:
    def __init__(self, *, get_user_use_case: GetUserUseCase) -> None:
        self._get_user_use_case = get_user_use_case

    def get_user(self, user_id: int) -> tuple[Response, int]:
        user = run_async(self._get_user_use_case.execute(user_id))
        return jsonify(user_payload(user)), 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("users", __name__, url_prefix="/api/users")
        bp.add_url_rule("/<int:user_id>", view_func=self.get_user, methods=["GET"])
        return bp
