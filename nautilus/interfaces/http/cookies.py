# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Carries the signed token in an HttpOnly cookie."""

from __future__ import annotations

from flask import Request, Response


class CookieTransport:
    def __init__(
        self,
        *,
        name: str,
        max_age: int,
        secure: bool,
        samesite: str = "Strict",
    ) -> None:
        self._name = name
        self._max_age = max_age
        self._secure = secure
        self._samesite = samesite

    @property
    def name(self) -> str:
        return self._name

    def write(self, response: Response, token: str) -> None:
        self._set(response, token, self._max_age)

    def clear(self, response: Response) -> None:
        self._set(response, "", 0)

    def read(self, request: Request) -> str | None:
        return request.cookies.get(self._name) or None

    def _set(self, response: Response, value: str, max_age: int) -> None:
        response.set_cookie(
            self._name,
            value,
            max_age=max_age,
            path="/",
            secure=self._secure,
            httponly=True,
            samesite=self._samesite,
        )


__all__ = ["CookieTransport"]
