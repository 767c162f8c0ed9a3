"""API keys service."""

from __future__ import annotations

from .models import ApiKey, ApiKeyRequest
from .service import Service


class ApiKeysService(Service):
    def create(self, request: ApiKeyRequest) -> ApiKey:
        """Create a key. The secret is only present in this response."""
        data = self._call("POST", "/apiKeys", f"create_api_key({request.name})", json=request.to_dict())
        return ApiKey.from_dict(data)

    def delete(self, key: str) -> None:
        # the key is a secret; keep it out of error messages
        self._call("DELETE", f"/apiKeys/{key}", f"delete_api_key({key[:4]}...)")
