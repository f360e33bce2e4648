"""
Keyward Core Package
====================
Key-type registry and rotation-aware primitive sets.

Provides:
- Key templates and opaque key material records
- A registry mapping key type identifiers to key managers
- Primitive set assembly with output-prefix framing
- Wrappers that expose a whole keyset as one sign/verify/AEAD primitive
- Built-in Ed25519, AES-GCM and AES-CTR-HMAC key managers (cryptography)
"""

from .errors import (
    KeywardError,
    UnknownTypeError,
    AlreadyRegisteredError,
    FormatError,
    GenerationError,
    KeyMaterialError,
    PrimitiveKindMismatchError,
    KeysetIntegrityError,
    DuplicatePrefixError,
    PrimaryKeyUnavailable,
    NoMatchingKeyError,
    KeysetError,
)
from .prefix import OutputPrefixKind, output_prefix, parse_prefix
from .primitives import PrimitiveKind
from .records import KeyMaterialClass, KeyMaterialRecord, KeyStatus
from .templates import KeyTemplate
from .registry import Registry
from .primitive_set import AssemblyResult, AssemblyWarning, PrimitiveSet, assemble_primitive_set
from .keyset import Keyset, KeysetManager
from .managers import default_registry

__all__ = [
    "KeywardError",
    "UnknownTypeError",
    "AlreadyRegisteredError",
    "FormatError",
    "GenerationError",
    "KeyMaterialError",
    "PrimitiveKindMismatchError",
    "KeysetIntegrityError",
    "DuplicatePrefixError",
    "PrimaryKeyUnavailable",
    "NoMatchingKeyError",
    "KeysetError",
    "OutputPrefixKind",
    "output_prefix",
    "parse_prefix",
    "PrimitiveKind",
    "KeyMaterialClass",
    "KeyMaterialRecord",
    "KeyStatus",
    "KeyTemplate",
    "Registry",
    "AssemblyResult",
    "AssemblyWarning",
    "PrimitiveSet",
    "assemble_primitive_set",
    "Keyset",
    "KeysetManager",
    "default_registry",
]
