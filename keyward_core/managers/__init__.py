# keyward_core/managers/__init__.py

from .base import KeyManager, PrivateKeyManager
from .ed25519 import Ed25519PrivateKeyManager, Ed25519PublicKeyManager
from .aes_gcm import AesGcmKeyManager
from .aes_ctr_hmac import AesCtrHmacAeadKeyManager
from keyward_core.config import load_config
from keyward_core.logger import get_logger
from keyward_core.registry import Registry
from keyward_core.wrappers import register_wrappers

BUILTIN_MANAGERS = {
    "ed25519": (Ed25519PrivateKeyManager, Ed25519PublicKeyManager),
    "aes-gcm": (AesGcmKeyManager,),
    "aes-ctr-hmac": (AesCtrHmacAeadKeyManager,),
}

COMPONENT_LOGGERS = ("Keyward.Registry", "Keyward.PrimitiveSet", "Keyward.Wrapper", "Keyward.Keyset")


def register_builtin_managers(registry: Registry, names) -> None:
    for name in names:
        classes = BUILTIN_MANAGERS.get(name)
        if classes is None:
            raise ValueError(f"Unknown key type family: {name}")
        for cls in classes:
            registry.register_key_manager(cls())


def default_registry(config: dict | None = None) -> Registry:
    """
    Factory for a populated registry.

    Registers the wrappers plus the built-in key managers named by
    ``key_types`` (config dict, else KEYWARD_KEY_TYPES, else all of them)
    and applies ``log_level`` to the component loggers.
    """
    cfg = load_config(config)
    for name in COMPONENT_LOGGERS:
        get_logger(name, level=cfg.log_level)
    registry = Registry()
    register_wrappers(registry)
    register_builtin_managers(registry, cfg.key_types)
    return registry


__all__ = [
    "KeyManager",
    "PrivateKeyManager",
    "Ed25519PrivateKeyManager",
    "Ed25519PublicKeyManager",
    "AesGcmKeyManager",
    "AesCtrHmacAeadKeyManager",
    "BUILTIN_MANAGERS",
    "register_builtin_managers",
    "default_registry",
]
