"""
keyward_core.registry
---------------------
Maps key type identifiers to the key managers able to handle them, and
primitive kinds to the wrappers that turn a primitive set into one callable
primitive.

The registry is populated at start-up and read-mostly afterwards. Writers
are serialized by a lock and publish a fresh read-only mapping when done;
readers never lock and only ever see fully registered managers.
"""

from __future__ import annotations
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional
import threading

from .errors import (
    AlreadyRegisteredError,
    GenerationError,
    KeyMaterialError,
    KeywardError,
    PrimitiveKindMismatchError,
    UnknownTypeError,
)
from .logger import get_logger
from .primitives import PrimitiveKind
from .prefix import OutputPrefixKind
from .records import KeyMaterialClass, KeyMaterialRecord, KeyStatus
from .templates import KeyTemplate
from .utils import UINT32_MAX, new_key_id

log = get_logger("Keyward.Registry")


def _identity(manager: Any) -> Any:
    ident = getattr(manager, "identity", None)
    if ident is not None:
        return ident
    cls = type(manager)
    return (cls.__module__, cls.__qualname__, getattr(manager, "key_type", None))


class Registry:
    def __init__(self) -> None:
        self._write_lock = threading.Lock()
        self._managers: Mapping[str, Any] = MappingProxyType({})
        self._wrappers: Mapping[PrimitiveKind, Any] = MappingProxyType({})

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------
    def register(self, type_id: str, manager: Any) -> None:
        """
        Bind ``manager`` to ``type_id``.

        Registering an equivalent manager again (same declared identity) is a
        no-op. A different manager for a bound type raises
        AlreadyRegisteredError and leaves the original in place.
        """
        if not type_id:
            raise ValueError("type_id must be a non-empty string")
        kind = PrimitiveKind(manager.supported_primitive_kind())
        with self._write_lock:
            existing = self._managers.get(type_id)
            if existing is not None:
                if existing is manager or _identity(existing) == _identity(manager):
                    log.debug(f"[REGISTRY] {type_id} already registered, ignoring duplicate")
                    return
                log.warning(f"[REGISTRY] rejected second manager for {type_id}")
                raise AlreadyRegisteredError(
                    f"key type {type_id!r} is already bound to {_identity(existing)}"
                )
            updated = dict(self._managers)
            updated[type_id] = manager
            self._managers = MappingProxyType(updated)
        log.info(f"[REGISTRY] registered {type_id} kind={kind.value}")

    def register_key_manager(self, manager: Any) -> None:
        self.register(manager.key_type, manager)

    def register_wrapper(self, wrapper: Any) -> None:
        kind = PrimitiveKind(wrapper.primitive_kind)
        with self._write_lock:
            existing = self._wrappers.get(kind)
            if existing is not None:
                if type(existing) is type(wrapper):
                    return
                raise AlreadyRegisteredError(f"a wrapper for {kind.value} is already registered")
            updated = dict(self._wrappers)
            updated[kind] = wrapper
            self._wrappers = MappingProxyType(updated)
        log.info(f"[REGISTRY] registered wrapper kind={kind.value}")

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------
    def lookup(self, type_id: str) -> Any:
        manager = self._managers.get(type_id)
        if manager is None:
            raise UnknownTypeError(type_id)
        return manager

    def key_types(self) -> Dict[str, Any]:
        return dict(self._managers)

    # ------------------------------------------------------------------
    # Key material
    # ------------------------------------------------------------------
    def new_key_material(
        self,
        template: KeyTemplate,
        key_id: Optional[int] = None,
        exclude_ids: Iterable[int] = (),
    ) -> KeyMaterialRecord:
        """
        Generate an enabled record for ``template``.

        ``key_id`` is allocated at random unless the caller supplies one;
        ``exclude_ids`` lets the keyset owner keep ids unique in its scope.
        """
        excluded = set(exclude_ids)
        if key_id is not None:
            if not isinstance(key_id, int) or isinstance(key_id, bool) or not 0 <= key_id <= UINT32_MAX:
                raise ValueError(f"key_id must be an unsigned 32-bit integer, got {key_id!r}")
            if key_id in excluded:
                raise ValueError(f"key_id {key_id} is already in use")

        manager = self.lookup(template.type_id)
        manager.validate_format(template.format_params)
        try:
            payload = manager.generate(template.format_params)
        except KeywardError:
            raise
        except Exception as e:
            raise GenerationError(f"{template.type_id}: key generation failed") from e

        if key_id is None:
            key_id = new_key_id(excluded)

        log.info(f"[REGISTRY] generated key type={template.type_id} key_id={key_id}")
        return KeyMaterialRecord(
            type_id=template.type_id,
            key_id=key_id,
            status=KeyStatus.ENABLED,
            prefix_kind=OutputPrefixKind(template.prefix_kind),
            payload=payload,
            material_class=getattr(manager, "material_class", KeyMaterialClass.SYMMETRIC),
        )

    def primitive_for(self, record: KeyMaterialRecord, kind: PrimitiveKind) -> Any:
        manager = self.lookup(record.type_id)
        kind = PrimitiveKind(kind)
        supported = manager.supported_primitive_kind()
        if supported is not kind:
            raise PrimitiveKindMismatchError(
                f"key type {record.type_id!r} provides {supported.value}, not {kind.value}"
            )
        try:
            return manager.primitive_from_key(record.payload, kind)
        except KeywardError:
            raise
        except Exception as e:
            raise KeyMaterialError(f"{record.type_id}: cannot build primitive for key {record.key_id}") from e

    # ------------------------------------------------------------------
    # Wrapping
    # ------------------------------------------------------------------
    def wrap(self, primitive_set: Any) -> Any:
        wrapper = self._wrappers.get(primitive_set.kind)
        if wrapper is None:
            raise PrimitiveKindMismatchError(f"no wrapper registered for primitive kind {primitive_set.kind.value}")
        return wrapper.wrap(primitive_set)
