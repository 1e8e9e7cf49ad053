"""Response helpers and base classes for the `{data, errors}` API envelope."""

from typing import Any

from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework.viewsets import ModelViewSet


def api_response(data: Any, status: int = 200) -> Response:
    """Return data wrapped in the standard envelope.

    All successful JSON responses should use this helper to ensure the
    `{ "data": ..., "errors": [] }` shape.
    """

    return Response({"data": data, "errors": []}, status=status)


def error_envelope(errors: list[Any], code: str) -> dict[str, Any]:
    """Body of a failed request: no data, the messages, and a machine-readable code."""

    return {"data": None, "errors": errors, "code": code}


def _is_enveloped(payload: Any) -> bool:
    return isinstance(payload, dict) and "data" in payload and "errors" in payload


class EnvelopeMixin:
    """Mixin to wrap successful responses in the standard envelope."""

    def finalize_response(self, request, response, *args, **kwargs):  # type: ignore[override]
        """Ensure non-error responses include the `{data, errors}` envelope."""
        if hasattr(response, "data") and response.status_code and response.status_code < 400:
            # 204 responses must not include a body.
            if response.status_code != 204 and not _is_enveloped(response.data):
                response.data = {"data": response.data, "errors": []}
        return super().finalize_response(request, response, *args, **kwargs)  # type: ignore[attr-defined]


class BaseAPIView(EnvelopeMixin, APIView):
    """APIView that ensures successful responses use the standard envelope."""


class BaseViewSet(EnvelopeMixin, ModelViewSet):
    """ModelViewSet variant that wraps successful responses in the envelope."""


__all__ = ["BaseAPIView", "BaseViewSet", "EnvelopeMixin", "api_response", "error_envelope"]
