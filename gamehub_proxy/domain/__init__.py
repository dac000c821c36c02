"""Pure domain logic: signing, pagination, manifests, payload transforms.

Nothing here touches FastAPI or the network, so every rule can be unit-tested
in isolation and reused by the smoke runner.
"""
__all__ = ["errors", "manifests", "pagination", "signing", "transforms"]
