"""Hydra ConfigStore registration utilities."""

from __future__ import annotations

from typing import Any

from hydra.core.config_store import ConfigStore
from loguru import logger
from pydantic import BaseModel


def register(
    cls: type[Any] | None = None,
    *,
    group: str | None = None,
    name: str | None = None,
    defaults: BaseModel | None = None,
    **kwargs: Any,
) -> type[Any] | Any:
    """Decorator storing a ``_target_`` config node for a class in Hydra's ConfigStore.

    The node's default values come from ``defaults`` (a pydantic config
    instance, dumped field by field) and are then overridden by ``kwargs``.
    A config group such as ``model`` can then select the class with
    ``model=<name>`` and Hydra's ``instantiate`` builds it.

    Arguments:
        cls: The class to register.
        group: The ConfigStore group. If ``None``, the name of the
            sub-package holding the class is used (``models`` for
            ``binary_classifier.models.classifier``).
        name: Config name inside the group. Defaults to the class name.
        defaults: Pydantic model whose fields seed the node.
        **kwargs: Extra or overriding default values.
    """

    def _process_class(target_cls: type[Any]) -> type[Any]:
        config_name = name or target_cls.__name__
        config_group = group or target_cls.__module__.split(".")[-2]

        node: dict[str, Any] = {
            "_target_": f"{target_cls.__module__}.{target_cls.__name__}"
        }
        if defaults is not None:
            node.update(defaults.model_dump(mode="json"))
        node.update(kwargs)

        logger.debug(
            f"Registering {target_cls.__name__} as '{config_name}' "
            f"in group '{config_group}'"
        )
        ConfigStore.instance().store(group=config_group, name=config_name, node=node)
        return target_cls

    if cls is None:
        return _process_class
    return _process_class(cls)
