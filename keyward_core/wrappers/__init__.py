# keyward_core/wrappers/__init__.py
from .base import PrimitiveWrapper
from .signature import PublicKeySignWrapper, PublicKeyVerifyWrapper
from .aead import AeadWrapper


def register_wrappers(registry) -> None:
    registry.register_wrapper(PublicKeySignWrapper())
    registry.register_wrapper(PublicKeyVerifyWrapper())
    registry.register_wrapper(AeadWrapper())


__all__ = [
    "PrimitiveWrapper",
    "PublicKeySignWrapper",
    "PublicKeyVerifyWrapper",
    "AeadWrapper",
    "register_wrappers",
]
